"""Persistence of finished sessions for the history view.

History is write-once: a session is stored when it ends and never read
back into the drill engine.
"""

import json
import logging
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.drills.session import SessionSummary
from backend.models.drill_session import DrillSessionRecord
from backend.models.outcome_log import OutcomeLog

logger = logging.getLogger(__name__)


def _to_datetime(timestamp: float) -> datetime:
    """Convert an epoch timestamp to a naive UTC datetime for SQLite."""
    return datetime.fromtimestamp(timestamp, UTC).replace(tzinfo=None)


async def save_summary(db: AsyncSession, summary: SessionSummary) -> DrillSessionRecord:
    """Store a finished session and its ledger, in ledger order."""
    stats = summary.statistics
    record = DrillSessionRecord(
        id=summary.session_id,
        duration_minutes=summary.duration_minutes,
        drill_kinds=json.dumps([k.value for k in summary.kinds]),
        word_count=summary.word_count,
        end_reason=summary.reason.value,
        total=stats.total,
        correct=stats.correct,
        incorrect=stats.incorrect,
        skipped=stats.skipped,
        accuracy=stats.accuracy,
        started_at=_to_datetime(summary.started_at),
        ended_at=_to_datetime(summary.ended_at),
    )
    db.add(record)

    for position, outcome in enumerate(summary.ledger):
        db.add(
            OutcomeLog(
                session_id=summary.session_id,
                position=position,
                exercise_id=outcome.exercise_id,
                word_id=outcome.word.id,
                drill_kind=outcome.kind.value,
                is_correct=outcome.is_correct,
                was_skipped=outcome.was_skipped,
                time_spent=outcome.time_spent,
                completed_at=_to_datetime(outcome.completed_at),
            )
        )

    await db.commit()
    logger.info("Saved session %s with %d outcomes", summary.session_id, len(summary.ledger))
    return record


async def recent_sessions(db: AsyncSession, limit: int = 20) -> list[DrillSessionRecord]:
    """Return the most recently ended sessions, newest first."""
    stmt = (
        select(DrillSessionRecord)
        .order_by(DrillSessionRecord.ended_at.desc())
        .limit(limit)
        .options(selectinload(DrillSessionRecord.outcomes))
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_sessions(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(DrillSessionRecord.id)))).scalar() or 0
