"""
Moods: log how the day felt and aggregate by mood name
"""
from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..auth import require_user
from ..database import get_db
from ..models import MoodCreate
from ..responses import listing, ok
from ..store import Store, moods_store

router = APIRouter(dependencies=[Depends(require_user)])

# First-seen emoji/color per name means first inserted: scan oldest first.
STATS_PIPELINE = [
    {"$sort": {"createdAt": 1}},
    {
        "$group": {
            "_id": "$mood.name",
            "count": {"$sum": 1},
            "emoji": {"$first": "$mood.emoji"},
            "color": {"$first": "$mood.color"},
        }
    },
    {"$sort": {"count": -1}},
]


def get_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> Store:
    return moods_store(db)


async def mood_stats(store: Store) -> list:
    groups = await store.aggregate(STATS_PIPELINE)
    return [
        {"name": group["_id"], "count": group["count"], "emoji": group["emoji"], "color": group["color"]}
        for group in groups
    ]


@router.get("")
async def get_moods(store: Store = Depends(get_store)):
    return listing(await store.find())


@router.get("/stats")
async def get_mood_stats(store: Store = Depends(get_store)):
    """Mood counts by name, most frequent first"""
    return ok(await mood_stats(store))


@router.get("/{mood_id}")
async def get_mood(mood_id: str, store: Store = Depends(get_store)):
    return ok(await store.get(mood_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_mood(payload: MoodCreate, store: Store = Depends(get_store)):
    mood = await store.insert(payload.model_dump(by_alias=True))
    return ok(mood, message="Mood saved! 💕")


@router.delete("/{mood_id}")
async def delete_mood(mood_id: str, store: Store = Depends(get_store)):
    await store.delete(mood_id)
    return ok(message="Mood deleted! 🗑️")
