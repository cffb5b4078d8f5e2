"""FastAPI application entry point and configuration."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from backend.api.session_router import close_all_sessions
from backend.api.session_router import router as session_router
from backend.api.stats_router import router as stats_router
from backend.api.words_router import router as words_router
from backend.config import settings
from backend.database import async_session, engine, init_db
from backend.vocab.service import get_vocabulary

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create tables and load the vocabulary on startup; stop running sessions on shutdown."""
    await init_db()
    logger.info("Serving %d vocabulary words", len(get_vocabulary()))
    yield
    await close_all_sessions()
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Timed Latin vocabulary drills",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session_router)
app.include_router(words_router)
app.include_router(stats_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Check database connectivity and return status."""
    async with async_session() as session:
        await session.execute(text("SELECT 1"))
    return {"status": "ok"}
