"""
Calendar events keyed by YYYY-MM-DD date strings
"""
import datetime
from typing import Optional

from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from ..auth import require_user
from ..database import get_db
from ..models import EventCreate, EventUpdate
from ..responses import listing, ok
from ..store import Store, events_store

router = APIRouter(dependencies=[Depends(require_user)])


def today() -> str:
    return datetime.date.today().isoformat()


def get_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> Store:
    return events_store(db)


@router.get("")
async def get_events(
    date: Optional[str] = None,
    upcoming: Optional[str] = None,
    store: Store = Depends(get_store),
):
    """Get events by date ascending; upcoming=true wins over date"""
    filters = {}
    if date:
        filters["date"] = date
    if upcoming == "true":
        filters["date"] = {"$gte": today()}
    return listing(await store.find(filters))


@router.get("/date/{day}")
async def get_events_for_date(day: str, store: Store = Depends(get_store)):
    events = await store.find({"date": day}, sort=(("time", ASCENDING),))
    return listing(events)


@router.get("/{event_id}")
async def get_event(event_id: str, store: Store = Depends(get_store)):
    return ok(await store.get(event_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(payload: EventCreate, store: Store = Depends(get_store)):
    return ok(await store.insert(payload.model_dump(by_alias=True)), message="Event created! 📅")


@router.put("/{event_id}")
async def update_event(event_id: str, payload: EventUpdate, store: Store = Depends(get_store)):
    return ok(await store.update(event_id, payload.changes()), message="Event updated! ✨")


@router.delete("/{event_id}")
async def delete_event(event_id: str, store: Store = Depends(get_store)):
    await store.delete(event_id)
    return ok(message="Event deleted! 🗑️")
