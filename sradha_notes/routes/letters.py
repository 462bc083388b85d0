"""
Letters to self, with read state and hearts
"""
from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..auth import require_user
from ..database import get_db
from ..models import LetterCreate, LetterUpdate
from ..responses import listing, ok
from ..store import Store, letters_store

router = APIRouter(dependencies=[Depends(require_user)])


def get_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> Store:
    return letters_store(db)


@router.get("")
async def get_letters(store: Store = Depends(get_store)):
    return listing(await store.find())


@router.get("/{letter_id}")
async def get_letter(letter_id: str, store: Store = Depends(get_store)):
    return ok(await store.get(letter_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_letter(payload: LetterCreate, store: Store = Depends(get_store)):
    document = payload.model_dump(by_alias=True)
    document.update(isRead=False, hearts=0)
    letter = await store.insert(document)
    return ok(letter, message="Letter saved with love! 💌")


@router.put("/{letter_id}")
async def update_letter(letter_id: str, payload: LetterUpdate, store: Store = Depends(get_store)):
    letter = await store.update(letter_id, payload.changes())
    return ok(letter, message="Letter updated! ✨")


@router.patch("/{letter_id}/read")
async def mark_as_read(letter_id: str, store: Store = Depends(get_store)):
    """Mark letter as read; calling it again changes nothing"""
    letter = await store.get(letter_id)
    if not letter.get("isRead"):
        letter = await store.update(letter_id, {"isRead": True})
    return ok(letter, message="Letter marked as read! 📬")


@router.patch("/{letter_id}/heart")
async def add_heart(letter_id: str, store: Store = Depends(get_store)):
    """Atomically add one heart. There is no dedup key: two calls, two hearts."""
    letter = await store.increment(letter_id, "hearts")
    return ok(letter, message="Heart added! 💕")


@router.delete("/{letter_id}")
async def delete_letter(letter_id: str, store: Store = Depends(get_store)):
    await store.delete(letter_id)
    return ok(message="Letter deleted! 🗑️")
