"""
Document store: one Store per MongoDB collection
"""
import re
import uuid
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from .errors import NotFoundError
from .models import utcnow

Sort = Sequence[Tuple[str, int]]


class Store:
    """CRUD over a single collection, keyed by our own string `id`."""

    def __init__(self, db: AsyncIOMotorDatabase, collection: str, entity: str,
                 sort: Sort = (("createdAt", DESCENDING),)):
        self.collection = db[collection]
        self.entity = entity
        self.sort = list(sort)

    @staticmethod
    def _projection(exclude: Iterable[str] = ()) -> Dict[str, int]:
        projection = {"_id": 0}
        for field in exclude:
            projection[field] = 0
        return projection

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        now = utcnow()
        record = {"id": str(uuid.uuid4()), **document, "createdAt": now, "updatedAt": now}
        await self.collection.insert_one(record)
        record.pop("_id", None)
        return record

    async def get(self, record_id: str, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        record = await self.collection.find_one({"id": record_id}, self._projection(exclude))
        if record is None:
            raise NotFoundError(self.entity)
        return record

    async def find(self, filters: Optional[Dict[str, Any]] = None, search: Optional[str] = None,
                   search_fields: Sequence[str] = (), sort: Optional[Sort] = None,
                   exclude: Iterable[str] = ()) -> List[Dict[str, Any]]:
        query = dict(filters or {})
        if search and search_fields:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [{field: pattern} for field in search_fields]
        cursor = self.collection.find(query, self._projection(exclude))
        cursor = cursor.sort(list(sort) if sort is not None else self.sort)
        return await cursor.to_list(None)

    async def update(self, record_id: str, fields: Dict[str, Any],
                     exclude: Iterable[str] = ()) -> Dict[str, Any]:
        changes = {key: value for key, value in fields.items() if key not in ("id", "createdAt")}
        changes["updatedAt"] = utcnow()
        record = await self.collection.find_one_and_update(
            {"id": record_id},
            {"$set": changes},
            projection=self._projection(exclude),
            return_document=ReturnDocument.AFTER,
        )
        if record is None:
            raise NotFoundError(self.entity)
        return record

    async def increment(self, record_id: str, field: str, amount: int = 1) -> Dict[str, Any]:
        record = await self.collection.find_one_and_update(
            {"id": record_id},
            {"$inc": {field: amount}, "$set": {"updatedAt": utcnow()}},
            projection=self._projection(),
            return_document=ReturnDocument.AFTER,
        )
        if record is None:
            raise NotFoundError(self.entity)
        return record

    async def delete(self, record_id: str) -> Dict[str, Any]:
        record = await self.collection.find_one_and_delete({"id": record_id}, projection=self._projection())
        if record is None:
            raise NotFoundError(self.entity)
        return record

    async def delete_many(self, filters: Dict[str, Any]) -> int:
        result = await self.collection.delete_many(filters)
        return result.deleted_count

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        return await self.collection.count_documents(filters or {})

    async def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return await self.collection.aggregate(pipeline).to_list(None)


# =====================================================================================
# COLLECTIONS
# =====================================================================================

NOTES = "notes"
MOODS = "moods"
LETTERS = "letters"
MEMORIES = "memories"
TODOS = "todos"
EVENTS = "events"
STUDY_SECTIONS = "studysections"
STUDY_PDFS = "studypdfs"

# (collection, index keys) created at startup; mirrors the default sort orders
INDEXES = [
    (NOTES, [("createdAt", DESCENDING)]),
    (NOTES, [("isPinned", DESCENDING), ("createdAt", DESCENDING)]),
    (NOTES, [("category", ASCENDING)]),
    (NOTES, [("isArchived", ASCENDING)]),
    (MOODS, [("date", DESCENDING)]),
    (MOODS, [("mood.name", ASCENDING)]),
    (LETTERS, [("createdAt", DESCENDING)]),
    (LETTERS, [("isRead", ASCENDING)]),
    (MEMORIES, [("createdAt", DESCENDING)]),
    (MEMORIES, [("date", DESCENDING)]),
    (TODOS, [("completed", ASCENDING), ("createdAt", DESCENDING)]),
    (TODOS, [("priority", ASCENDING)]),
    (EVENTS, [("date", ASCENDING)]),
    (STUDY_SECTIONS, [("createdAt", DESCENDING)]),
    (STUDY_PDFS, [("sectionId", ASCENDING), ("createdAt", DESCENDING)]),
    (STUDY_PDFS, [("isFavorite", DESCENDING)]),
]


def notes_store(db: AsyncIOMotorDatabase) -> Store:
    return Store(db, NOTES, "Note", sort=(("isPinned", DESCENDING), ("createdAt", DESCENDING)))


def moods_store(db: AsyncIOMotorDatabase) -> Store:
    return Store(db, MOODS, "Mood", sort=(("date", DESCENDING),))


def letters_store(db: AsyncIOMotorDatabase) -> Store:
    return Store(db, LETTERS, "Letter")


def memories_store(db: AsyncIOMotorDatabase) -> Store:
    return Store(db, MEMORIES, "Memory")


def todos_store(db: AsyncIOMotorDatabase) -> Store:
    return Store(db, TODOS, "Todo")


def events_store(db: AsyncIOMotorDatabase) -> Store:
    return Store(db, EVENTS, "Event", sort=(("date", ASCENDING),))


def sections_store(db: AsyncIOMotorDatabase) -> Store:
    return Store(db, STUDY_SECTIONS, "Section")


def pdfs_store(db: AsyncIOMotorDatabase) -> Store:
    return Store(db, STUDY_PDFS, "PDF")
