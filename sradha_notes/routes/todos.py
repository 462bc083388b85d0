"""
Todos with priorities and a bulk clear of finished ones
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..auth import require_user
from ..database import get_db
from ..models import TodoCreate, TodoUpdate
from ..responses import listing, ok
from ..store import Store, todos_store

router = APIRouter(dependencies=[Depends(require_user)])


def get_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> Store:
    return todos_store(db)


@router.get("")
async def get_todos(filter: Optional[str] = None, store: Store = Depends(get_store)):
    """Get todos; filter=active or filter=completed narrows the list"""
    filters = {}
    if filter == "active":
        filters["completed"] = False
    elif filter == "completed":
        filters["completed"] = True
    return listing(await store.find(filters))


@router.get("/{todo_id}")
async def get_todo(todo_id: str, store: Store = Depends(get_store)):
    return ok(await store.get(todo_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_todo(payload: TodoCreate, store: Store = Depends(get_store)):
    document = payload.model_dump(by_alias=True)
    document["completed"] = False
    return ok(await store.insert(document), message="Todo added! ✅")


@router.put("/{todo_id}")
async def update_todo(todo_id: str, payload: TodoUpdate, store: Store = Depends(get_store)):
    return ok(await store.update(todo_id, payload.changes()), message="Todo updated! ✨")


@router.patch("/{todo_id}/toggle")
async def toggle_todo(todo_id: str, store: Store = Depends(get_store)):
    todo = await store.get(todo_id)
    todo = await store.update(todo_id, {"completed": not todo.get("completed", False)})
    return ok(todo, message="Task completed! 🎉" if todo["completed"] else "Task reopened")


@router.delete("/completed/clear")
async def clear_completed(store: Store = Depends(get_store)):
    deleted = await store.delete_many({"completed": True})
    return ok({"deletedCount": deleted}, message=f"{deleted} completed todos cleared! 🧹", count=deleted)


@router.delete("/{todo_id}")
async def delete_todo(todo_id: str, store: Store = Depends(get_store)):
    await store.delete(todo_id)
    return ok(message="Todo deleted! 🗑️")
