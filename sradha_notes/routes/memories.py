"""
Memories: photos with a story, and hearts
"""
import logging

from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..auth import require_user
from ..database import get_db
from ..images import normalize_images, release_images
from ..media import MediaHost, get_media
from ..models import MemoryCreate, MemoryUpdate
from ..responses import listing, ok
from ..store import Store, memories_store

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_user)])

IMAGE_FOLDER = "memories"


def get_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> Store:
    return memories_store(db)


@router.get("")
async def get_memories(store: Store = Depends(get_store)):
    return listing(await store.find())


@router.get("/{memory_id}")
async def get_memory(memory_id: str, store: Store = Depends(get_store)):
    return ok(await store.get(memory_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_memory(
    payload: MemoryCreate,
    store: Store = Depends(get_store),
    media: MediaHost = Depends(get_media),
):
    """Create memory; images may be base64, URLs or {url, externalId}"""
    document = payload.model_dump(by_alias=True, exclude={"images"})
    document["images"] = await normalize_images(payload.images, media, f"{media.folder}/{IMAGE_FOLDER}")
    document["hearts"] = 0
    memory = await store.insert(document)
    logger.info(f"Memory {memory['id']} saved with {len(memory['images'])} images")
    return ok(memory, message="Memory saved! 📸")


@router.put("/{memory_id}")
async def update_memory(
    memory_id: str,
    payload: MemoryUpdate,
    store: Store = Depends(get_store),
    media: MediaHost = Depends(get_media),
):
    memory = await store.get(memory_id)
    changes = payload.changes(exclude=("images",))
    if payload.images:
        added = await normalize_images(payload.images, media, f"{media.folder}/{IMAGE_FOLDER}")
        changes["images"] = list(memory.get("images") or []) + added
    return ok(await store.update(memory_id, changes), message="Memory updated! ✨")


@router.patch("/{memory_id}/heart")
async def add_heart(memory_id: str, store: Store = Depends(get_store)):
    memory = await store.increment(memory_id, "hearts")
    return ok(memory, message="Heart added! 💕")


@router.delete("/{memory_id}")
async def delete_memory(
    memory_id: str,
    store: Store = Depends(get_store),
    media: MediaHost = Depends(get_media),
):
    """Release the memory's images (best effort), then delete it"""
    memory = await store.get(memory_id)
    await release_images(memory.get("images"), media)
    await store.delete(memory_id)
    return ok(message="Memory deleted! 🗑️")
