"""
Notes: CRUD plus love/pin/archive toggles and duplication
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..auth import require_user
from ..database import get_db
from ..images import normalize_images, release_images
from ..media import MediaHost, get_media
from ..models import NoteCreate, NoteUpdate
from ..responses import listing, ok
from ..store import Store, notes_store

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_user)])

IMAGE_FOLDER = "notes"


def get_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> Store:
    return notes_store(db)


def image_folder(media: MediaHost) -> str:
    return f"{media.folder}/{IMAGE_FOLDER}"


@router.get("")
async def get_notes(
    category: Optional[str] = None,
    archived: Optional[str] = None,
    search: Optional[str] = None,
    store: Store = Depends(get_store),
):
    """Get notes, unarchived unless archived=true"""
    filters = {"isArchived": archived == "true"}
    if category and category != "all":
        filters["category"] = category
    notes = await store.find(filters, search=search, search_fields=("title", "content"))
    return listing(notes)


@router.get("/{note_id}")
async def get_note(note_id: str, store: Store = Depends(get_store)):
    return ok(await store.get(note_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: NoteCreate,
    store: Store = Depends(get_store),
    media: MediaHost = Depends(get_media),
):
    """Create new note, uploading any new images first"""
    document = payload.model_dump(by_alias=True, exclude={"images"})
    document["images"] = await normalize_images(payload.images, media, image_folder(media))
    document.update(isLoved=False, isPinned=False, isArchived=False)
    note = await store.insert(document)
    logger.info(f"Note {note['id']} created with {len(note['images'])} images")
    return ok(note, message="Note created successfully! 💕")


@router.put("/{note_id}")
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    store: Store = Depends(get_store),
    media: MediaHost = Depends(get_media),
):
    """Update note; new images are appended to the existing ones"""
    note = await store.get(note_id)
    changes = payload.changes(exclude=("images",))
    if changes.get("isArchived") is True:
        changes["isPinned"] = False
    if payload.images:
        added = await normalize_images(payload.images, media, image_folder(media))
        changes["images"] = list(note.get("images") or []) + added
    updated = await store.update(note_id, changes)
    return ok(updated, message="Note updated successfully! ✨")


async def toggle(store: Store, note_id: str, field: str) -> dict:
    note = await store.get(note_id)
    changes = {field: not note.get(field, False)}
    if field == "isArchived" and changes[field]:
        # Unpin when archiving; unarchiving leaves the pin off
        changes["isPinned"] = False
    return await store.update(note_id, changes)


@router.patch("/{note_id}/love")
async def toggle_love(note_id: str, store: Store = Depends(get_store)):
    note = await toggle(store, note_id, "isLoved")
    return ok(note, message="Note loved! ❤️" if note["isLoved"] else "Love removed 🤍")


@router.patch("/{note_id}/pin")
async def toggle_pin(note_id: str, store: Store = Depends(get_store)):
    note = await toggle(store, note_id, "isPinned")
    return ok(note, message="Note pinned! 📌" if note["isPinned"] else "Note unpinned")


@router.patch("/{note_id}/archive")
async def toggle_archive(note_id: str, store: Store = Depends(get_store)):
    note = await toggle(store, note_id, "isArchived")
    return ok(note, message="Note archived! 📦" if note["isArchived"] else "Note restored! ✨")


@router.post("/{note_id}/duplicate", status_code=status.HTTP_201_CREATED)
async def duplicate_note(note_id: str, store: Store = Depends(get_store)):
    """Copy a note; the copy starts unloved, unpinned and unarchived"""
    original = await store.get(note_id)
    title = original.get("title")
    duplicate = await store.insert({
        "title": f"{title} (Copy)" if title else title,
        "content": f"{original['content']} (Copy)",
        "color": original.get("color"),
        "emoji": original.get("emoji"),
        "category": original.get("category"),
        "images": list(original.get("images") or []),
        "isLoved": False,
        "isPinned": False,
        "isArchived": False,
    })
    return ok(duplicate, message="Note duplicated! 📋")


@router.delete("/{note_id}")
async def delete_note(
    note_id: str,
    store: Store = Depends(get_store),
    media: MediaHost = Depends(get_media),
):
    """Release the note's images, then delete it"""
    note = await store.get(note_id)
    await release_images(note.get("images"), media)
    await store.delete(note_id)
    return ok(message="Note deleted successfully! 🗑️")
