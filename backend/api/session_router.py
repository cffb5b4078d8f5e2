"""API routes for timed drill sessions."""

import asyncio
import logging
import random
import time
from dataclasses import dataclass, field

from fastapi import APIRouter, HTTPException

from backend.api.schemas import (
    AnswerRequest,
    AnswerResponse,
    ExerciseResponse,
    OutcomeResponse,
    SessionStartRequest,
    SessionStartResponse,
    SessionStatsResponse,
    SessionSummaryResponse,
    StatisticsResponse,
    WordResponse,
)
from backend.config import settings
from backend.database import async_session
from backend.drills.clock import AsyncTicker
from backend.drills.exercises import (
    ChoiceExercise,
    TypedExercise,
    build_exercise,
    check_typed_answer,
)
from backend.drills.history import save_summary
from backend.drills.kinds import parse_kinds
from backend.drills.results import ExerciseOutcome
from backend.drills.session import (
    DrillSession,
    SessionClosedError,
    SessionStateError,
    SessionSummary,
    start_session,
)
from backend.vocab.matching import VocabularyFilter
from backend.vocab.service import get_vocabulary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/session", tags=["session"])


@dataclass
class ActiveSession:
    """A running session plus what the HTTP layer needs around it."""

    session: DrillSession
    ticker: AsyncTicker
    rng: random.Random
    created: float = field(default_factory=time.monotonic)
    contents: dict[str, ChoiceExercise | TypedExercise] = field(default_factory=dict)
    persist_task: asyncio.Task | None = None


# In-memory session store (single process)
_active_sessions: dict[str, ActiveSession] = {}


def _purge_stale_sessions() -> None:
    """Drop sessions older than the TTL, ending live ones so their results reach history."""
    cutoff = time.monotonic() - settings.session_ttl_seconds
    for session_id in [sid for sid, a in _active_sessions.items() if a.created < cutoff]:
        stale = _active_sessions.pop(session_id)
        if not stale.session.is_over:
            stale.session.end_session()
        stale.ticker.cancel()
        logger.info("Purged stale session %s", session_id)


async def close_all_sessions() -> None:
    """Stop every ticker and wait for pending history writes. Called on shutdown."""
    for active in _active_sessions.values():
        active.ticker.cancel()
        if active.persist_task is not None:
            await active.persist_task
    _active_sessions.clear()


def _get_active(session_id: str) -> ActiveSession:
    active = _active_sessions.get(session_id)
    if not active:
        raise HTTPException(status_code=404, detail="Session not found")
    return active


async def _persist(summary: SessionSummary) -> None:
    try:
        async with async_session() as db:
            await save_summary(db, summary)
    except Exception:
        logger.exception("Failed to persist session %s", summary.session_id)


def _content_for(active: ActiveSession) -> ChoiceExercise | TypedExercise | None:
    spec = active.session.current
    if spec is None:
        return None
    content = active.contents.get(spec.id)
    if content is None:
        # Only the current exercise's content is ever needed
        active.contents.clear()
        content = build_exercise(spec, active.session.pool, rng=active.rng)
        active.contents[spec.id] = content
    return content


def _exercise_response(active: ActiveSession) -> ExerciseResponse | None:
    content = _content_for(active)
    if content is None:
        return None
    spec = active.session.current
    options = list(content.options) if isinstance(content, ChoiceExercise) else None
    question_kind = content.question_kind.value if isinstance(content, ChoiceExercise) else None
    return ExerciseResponse(
        exercise_id=content.exercise_id,
        kind=content.kind.value,
        question_kind=question_kind,
        title=content.title,
        instruction=content.instruction,
        prompt=content.prompt,
        options=options,
        word_id=spec.word.id,
        remaining_seconds=active.session.remaining_seconds(),
    )


def _summary_response(summary: SessionSummary) -> SessionSummaryResponse:
    return SessionSummaryResponse(
        session_id=summary.session_id,
        reason=summary.reason.value,
        statistics=StatisticsResponse.from_stats(summary.statistics),
        outcomes=[
            OutcomeResponse(
                exercise_id=o.exercise_id,
                word_id=o.word.id,
                kind=o.kind.value,
                is_correct=o.is_correct,
                was_skipped=o.was_skipped,
                time_spent=o.time_spent,
            )
            for o in summary.ledger
        ],
    )


def _assess(content: ChoiceExercise | TypedExercise, request: AnswerRequest, active: ActiveSession) -> bool:
    if request.is_correct is not None:
        return request.is_correct
    if request.response is None:
        raise HTTPException(status_code=422, detail="Either is_correct or response is required")
    if isinstance(content, ChoiceExercise):
        return content.is_correct(request.response)
    word = active.session.current.word
    return check_typed_answer(word, request.response, request.genitive or "").is_correct


def _answer_response(
    active: ActiveSession,
    outcome: ExerciseOutcome,
    correct_answer: str,
) -> AnswerResponse:
    session = active.session
    return AnswerResponse(
        is_correct=outcome.is_correct,
        was_skipped=outcome.was_skipped,
        correct_answer=correct_answer,
        time_spent=outcome.time_spent,
        statistics=StatisticsResponse.from_stats(session.statistics()),
        next_exercise=_exercise_response(active),
        phase=session.phase.value,
        remaining_seconds=session.remaining_seconds(),
    )


@router.post("/start", response_model=SessionStartResponse)
async def session_start(request: SessionStartRequest) -> SessionStartResponse:
    """Start a new drill session."""
    _purge_stale_sessions()
    vocabulary = get_vocabulary()

    if request.word_ids is not None:
        pool = vocabulary.get_by_ids(request.word_ids)
    else:
        pool = vocabulary.filter(
            VocabularyFilter.build(request.declensions, request.genders, request.query)
        )

    if len(pool) < max(1, settings.min_pool_size):
        raise HTTPException(status_code=400, detail="Not enough words selected for a session")

    try:
        kinds = parse_kinds(request.drill_kinds)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    rng = random.Random()
    session = start_session(
        pool,
        kinds,
        request.duration_minutes,
        rng=rng,
        skip_review=request.skip_review,
    )
    ticker = AsyncTicker(session.clock)
    active = ActiveSession(session=session, ticker=ticker, rng=rng)

    def _on_end(summary: SessionSummary) -> None:
        active.ticker.cancel()
        active.persist_task = asyncio.get_running_loop().create_task(_persist(summary))

    session.on_end(_on_end)
    ticker.start()
    _active_sessions[session.id] = active

    return SessionStartResponse(
        session_id=session.id,
        phase=session.phase.value,
        word_count=len(session.pool),
        drill_kinds=[k.value for k in session.kinds],
        duration_minutes=session.duration_minutes,
        remaining_seconds=session.remaining_seconds(),
        words=[WordResponse.from_word(w) for w in session.pool],
    )


@router.post("/{session_id}/continue", response_model=ExerciseResponse)
async def session_continue(session_id: str) -> ExerciseResponse:
    """Leave the review phase and get the first exercise."""
    active = _get_active(session_id)
    try:
        active.session.continue_to_exercises()
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _exercise_response(active)


@router.get("/{session_id}/current", response_model=ExerciseResponse)
async def session_current(session_id: str) -> ExerciseResponse:
    """Get the exercise currently shown."""
    active = _get_active(session_id)
    if active.session.is_over:
        raise HTTPException(status_code=409, detail="Session already ended")

    exercise = _exercise_response(active)
    if exercise is None:
        raise HTTPException(status_code=409, detail="Session is still in review")
    return exercise


@router.post("/{session_id}/answer", response_model=AnswerResponse)
async def session_answer(session_id: str, request: AnswerRequest) -> AnswerResponse:
    """Answer the current exercise and get the next one."""
    active = _get_active(session_id)
    content = _content_for(active)
    if active.session.is_over:
        raise HTTPException(status_code=409, detail="Session already ended")
    if content is None:
        raise HTTPException(status_code=409, detail="Session is still in review")
    if content.exercise_id != request.exercise_id:
        raise HTTPException(status_code=400, detail="Exercise ID mismatch")

    is_correct = _assess(content, request, active)
    outcome = active.session.answer(is_correct)
    if outcome is None:
        raise HTTPException(status_code=409, detail="Session already ended")
    return _answer_response(active, outcome, content.answer)


@router.post("/{session_id}/skip", response_model=AnswerResponse)
async def session_skip(session_id: str) -> AnswerResponse:
    """Skip the current exercise."""
    active = _get_active(session_id)
    content = _content_for(active)
    if content is None and not active.session.is_over:
        raise HTTPException(status_code=409, detail="Session is still in review")

    outcome = active.session.skip()
    if outcome is None:
        raise HTTPException(status_code=409, detail="Session already ended")
    return _answer_response(active, outcome, content.answer)


@router.post("/{session_id}/pause", response_model=SessionStatsResponse)
async def session_pause(session_id: str) -> SessionStatsResponse:
    active = _get_active(session_id)
    active.session.pause()
    return await session_stats(session_id)


@router.post("/{session_id}/resume", response_model=SessionStatsResponse)
async def session_resume(session_id: str) -> SessionStatsResponse:
    active = _get_active(session_id)
    active.session.resume()
    return await session_stats(session_id)


@router.get("/{session_id}/stats", response_model=SessionStatsResponse)
async def session_stats(session_id: str) -> SessionStatsResponse:
    """Get live stats for a session."""
    session = _get_active(session_id).session
    return SessionStatsResponse(
        phase=session.phase.value,
        remaining_seconds=session.remaining_seconds(),
        progress=session.progress,
        statistics=StatisticsResponse.from_stats(session.statistics()),
    )


@router.post("/{session_id}/end", response_model=SessionSummaryResponse)
async def session_end(session_id: str) -> SessionSummaryResponse:
    """End a session early and return its summary."""
    active = _get_active(session_id)
    try:
        summary = active.session.end_session()
    except SessionClosedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    if active.persist_task is not None:
        await active.persist_task
    return _summary_response(summary)


@router.get("/{session_id}/summary", response_model=SessionSummaryResponse)
async def session_summary(session_id: str) -> SessionSummaryResponse:
    """Get the summary of a session that already ended (e.g. by expiry)."""
    summary = _get_active(session_id).session.summary
    if summary is None:
        raise HTTPException(status_code=409, detail="Session is still running")
    return _summary_response(summary)
