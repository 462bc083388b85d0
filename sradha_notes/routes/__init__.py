# Routes package __init__.py - re-exports routers for server.py convenience
from .auth import router as auth_router
from .notes import router as notes_router
from .moods import router as moods_router
from .letters import router as letters_router
from .memories import router as memories_router
from .todos import router as todos_router
from .events import router as events_router
from .study import router as study_router
from .upload import router as upload_router

__all__ = [
    'auth_router', 'notes_router', 'moods_router', 'letters_router', 'memories_router',
    'todos_router', 'events_router', 'study_router', 'upload_router',
]
