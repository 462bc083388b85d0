"""
Sradha's Notes - personal notes & journaling backend
FastAPI + MongoDB (Motor) implementation
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from . import config
from .database import MongoClient, get_database
from .errors import register_error_handlers
from .migrate import ensure_indexes
from .routes import (
    auth_router,
    events_router,
    letters_router,
    memories_router,
    moods_router,
    notes_router,
    study_router,
    todos_router,
    upload_router,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("💕 Sradha's Notes is starting")
    await ensure_indexes(get_database())
    logger.info("✨ Sradha's Notes Database is ready!")
    yield
    # Shutdown
    MongoClient.close()
    logger.info("👋 Sradha's Notes stopped")


app = FastAPI(title="Sradha's Notes", version="1.0.0", lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# =====================================================================================
# API ROUTES
# =====================================================================================

app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(notes_router, prefix="/api/notes", tags=["notes"])
app.include_router(moods_router, prefix="/api/moods", tags=["moods"])
app.include_router(letters_router, prefix="/api/letters", tags=["letters"])
app.include_router(memories_router, prefix="/api/memories", tags=["memories"])
app.include_router(todos_router, prefix="/api/todos", tags=["todos"])
app.include_router(events_router, prefix="/api/events", tags=["events"])
app.include_router(upload_router, prefix="/api/upload", tags=["upload"])
app.include_router(study_router, prefix="/api/study", tags=["study"])

# =====================================================================================
# WELCOME & HEALTH CHECK
# =====================================================================================

@app.get("/")
async def welcome():
    return {
        "message": "💕 Welcome to Sradha's Notes API! 💕",
        "status": "Server is running beautifully ✨",
        "endpoints": {
            "auth": "/api/auth",
            "notes": "/api/notes",
            "moods": "/api/moods",
            "letters": "/api/letters",
            "memories": "/api/memories",
            "todos": "/api/todos",
            "events": "/api/events",
            "upload": "/api/upload",
            "study": "/api/study",
        },
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "message": "Server is running with love 💖",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def main():
    uvicorn.run("sradha_notes.server:app", host="0.0.0.0", port=config.PORT, log_level="info")


if __name__ == "__main__":
    main()
