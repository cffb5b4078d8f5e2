"""API routes for vocabulary statistics and session history."""

import json
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.schemas import HistoryEntryResponse, VocabularyStatsResponse
from backend.database import get_session
from backend.drills.history import recent_sessions
from backend.vocab.service import get_vocabulary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/vocabulary", response_model=VocabularyStatsResponse)
async def vocabulary_stats() -> VocabularyStatsResponse:
    """Summarize the vocabulary by declension and gender."""
    return VocabularyStatsResponse(**get_vocabulary().statistics())


@router.get("/history", response_model=list[HistoryEntryResponse])
async def session_history(
    limit: int = Query(default=20, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
) -> list[HistoryEntryResponse]:
    """List recently finished sessions, newest first."""
    records = await recent_sessions(db, limit=limit)
    return [
        HistoryEntryResponse(
            session_id=r.id,
            duration_minutes=r.duration_minutes,
            drill_kinds=json.loads(r.drill_kinds),
            word_count=r.word_count,
            end_reason=r.end_reason,
            total=r.total,
            correct=r.correct,
            incorrect=r.incorrect,
            skipped=r.skipped,
            accuracy=r.accuracy,
            started_at=r.started_at,
            ended_at=r.ended_at,
        )
        for r in records
    ]
