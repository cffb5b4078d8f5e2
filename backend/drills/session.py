"""Drill session orchestrator.

Coordinates the lookahead queue, the countdown clock and the result
ledger into one session flow: review, then exercises, then summary.
A session is an explicit object; several can run side by side in one
process without sharing any mutable state.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from backend.config import settings
from backend.drills.clock import SessionClock
from backend.drills.generator import ExerciseSpec, RandomSource, TimeSource
from backend.drills.kinds import DrillKind
from backend.drills.queue import DrillQueue
from backend.drills.results import ExerciseOutcome, ResultAccumulator, Statistics
from backend.vocab.word import WordRecord

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    REVIEW = "review"
    EXERCISES = "exercises"
    SUMMARY = "summary"


class EndReason(str, Enum):
    EXPIRED = "expired"
    ENDED_BY_USER = "ended_by_user"


class SessionStateError(RuntimeError):
    """A session method was called in a phase that doesn't allow it."""


class SessionClosedError(SessionStateError):
    """The session already reached its summary."""


@dataclass(frozen=True)
class SessionSummary:
    """Final results handed out once when a session ends."""

    session_id: str
    statistics: Statistics
    ledger: tuple[ExerciseOutcome, ...]
    reason: EndReason
    started_at: float
    ended_at: float
    duration_minutes: int
    word_count: int
    kinds: tuple[DrillKind, ...]


class DrillSession:
    """Manages one timed drill session for a learner."""

    def __init__(
        self,
        pool: Sequence[WordRecord],
        kinds: Sequence[DrillKind],
        duration_minutes: int,
        rng: RandomSource | None = None,
        time_source: TimeSource = time.time,
        lookahead: int | None = None,
        clock: SessionClock | None = None,
    ) -> None:
        """Validate the configuration, fill the queue and start the clock.

        Raises:
            ValueError: If the pool or kinds are empty, or the duration is
                not a positive number of minutes.
        """
        if not pool:
            raise ValueError("A drill session needs at least one word")
        if not kinds:
            raise ValueError("A drill session needs at least one exercise kind")
        if duration_minutes <= 0:
            raise ValueError(f"Session duration must be positive, got {duration_minutes}")

        self.id = str(uuid.uuid4())
        self.pool: tuple[WordRecord, ...] = tuple(pool)
        # Deduplicate while keeping the caller's order so draws stay reproducible
        self.kinds: tuple[DrillKind, ...] = tuple(dict.fromkeys(kinds))
        self.duration_minutes = duration_minutes
        self.phase = SessionPhase.REVIEW

        self._time = time_source
        self._queue = DrillQueue(self.pool, self.kinds, lookahead=lookahead, rng=rng, now=time_source)
        self._results = ResultAccumulator()
        self._clock = clock or SessionClock()
        self._current: ExerciseSpec | None = None
        self._current_since: float | None = None
        self._end_callbacks: list[Callable[[SessionSummary], None]] = []
        self._summary: SessionSummary | None = None

        self._queue.initialize()
        self.started_at = self._time()
        self._clock.on_expire(self._handle_expiry)
        self._clock.start(duration_minutes * 60)

    # --- Read-only views ---

    @property
    def current(self) -> ExerciseSpec | None:
        """The exercise being shown, or None outside the exercises phase."""
        return self._current

    @property
    def clock(self) -> SessionClock:
        return self._clock

    @property
    def summary(self) -> SessionSummary | None:
        return self._summary

    @property
    def is_over(self) -> bool:
        return self.phase is SessionPhase.SUMMARY

    @property
    def pending(self) -> int:
        """Number of exercises buffered behind the current one."""
        return len(self._queue)

    @property
    def progress(self) -> float:
        """Fraction of known exercises already resolved, for a progress bar. 1.0 once ended."""
        if self.is_over:
            return 1.0
        done = len(self._results)
        return done / (done + len(self._queue) + 1)

    def remaining_seconds(self) -> int:
        return self._clock.remaining_seconds()

    def statistics(self) -> Statistics:
        return self._results.snapshot()

    def ledger(self) -> tuple[ExerciseOutcome, ...]:
        return self._results.ledger()

    def on_end(self, callback: Callable[[SessionSummary], None]) -> None:
        """Register a callback invoked once with the summary when the session ends."""
        self._end_callbacks.append(callback)

    # --- Transitions ---

    def continue_to_exercises(self) -> ExerciseSpec:
        """Leave the review phase and present the first exercise.

        Raises:
            SessionClosedError: If the session already ended.
            SessionStateError: If exercises already started.
        """
        if self.phase is SessionPhase.SUMMARY:
            raise SessionClosedError("Session already ended")
        if self.phase is SessionPhase.EXERCISES:
            raise SessionStateError("Exercises already started")

        self.phase = SessionPhase.EXERCISES
        self._advance()
        logger.debug("Session %s entered exercises", self.id)
        return self._current

    def answer(self, is_correct: bool) -> ExerciseOutcome | None:
        """Record an answer to the current exercise and move to the next one.

        Returns the recorded outcome, or None if the session already ended.
        A late answer is discarded so the ledger never grows after the end.
        """
        return self._resolve(is_correct=is_correct, skipped=False)

    def skip(self) -> ExerciseOutcome | None:
        """Skip the current exercise. Always recorded as incorrect with zero time."""
        return self._resolve(is_correct=False, skipped=True)

    def end_session(self) -> SessionSummary:
        """End the session at the learner's request.

        Raises:
            SessionClosedError: If the session already ended.
        """
        if self.phase is SessionPhase.SUMMARY:
            raise SessionClosedError("Session already ended")
        return self._finish(EndReason.ENDED_BY_USER)

    def pause(self) -> None:
        self._clock.pause()

    def resume(self) -> None:
        self._clock.resume()

    # --- Internals ---

    def _resolve(self, is_correct: bool, skipped: bool) -> ExerciseOutcome | None:
        if self.phase is SessionPhase.SUMMARY:
            logger.warning("Discarding %s on ended session %s", "skip" if skipped else "answer", self.id)
            return None
        if self.phase is not SessionPhase.EXERCISES or self._current is None:
            raise SessionStateError("No exercise is being shown yet")

        now = self._time()
        spec = self._current
        time_spent = 0 if skipped else max(0, int(now - self._current_since))

        outcome = ExerciseOutcome(
            exercise_id=spec.id,
            word=spec.word,
            kind=spec.kind,
            is_correct=is_correct and not skipped,
            time_spent=time_spent,
            completed_at=now,
            was_skipped=skipped,
        )
        self._results.record(outcome)
        self._advance()
        return outcome

    def _advance(self) -> None:
        self._current = self._queue.take_next()
        self._current_since = self._time()

    def _handle_expiry(self) -> None:
        if self.phase is not SessionPhase.SUMMARY:
            self._finish(EndReason.EXPIRED)

    def _finish(self, reason: EndReason) -> SessionSummary:
        self.phase = SessionPhase.SUMMARY
        self._clock.stop()
        self._queue.close()
        self._results.freeze()
        self._current = None
        self._current_since = None

        stats = self._results.snapshot()
        self._summary = SessionSummary(
            session_id=self.id,
            statistics=stats,
            ledger=self._results.ledger(),
            reason=reason,
            started_at=self.started_at,
            ended_at=self._time(),
            duration_minutes=self.duration_minutes,
            word_count=len(self.pool),
            kinds=self.kinds,
        )
        logger.info(
            "Session %s ended (%s): %d exercises, %d correct, %d skipped, accuracy %d%%",
            self.id,
            reason.value,
            stats.total,
            stats.correct,
            stats.skipped,
            stats.accuracy,
        )

        callbacks, self._end_callbacks = self._end_callbacks, []
        for callback in callbacks:
            callback(self._summary)
        return self._summary


def start_session(
    pool: Sequence[WordRecord],
    kinds: Sequence[DrillKind],
    duration_minutes: int | None = None,
    rng: RandomSource | None = None,
    time_source: TimeSource = time.time,
    lookahead: int | None = None,
    clock: SessionClock | None = None,
    skip_review: bool = False,
) -> DrillSession:
    """Start a new drill session.

    Args:
        pool: Words to drill.
        kinds: Enabled exercise kinds.
        duration_minutes: Session length (defaults to the configured default).
        rng: Random source for exercise generation.
        time_source: Clock used for timestamps and time spent per exercise.
        lookahead: Queue lookahead size (defaults to the configured size).
        clock: Countdown clock; a fresh SessionClock if omitted.
        skip_review: Go straight to the first exercise.

    Returns:
        A DrillSession ready for use.
    """
    duration = settings.default_duration_minutes if duration_minutes is None else duration_minutes
    session = DrillSession(
        pool,
        kinds,
        duration,
        rng=rng,
        time_source=time_source,
        lookahead=lookahead,
        clock=clock,
    )
    if skip_review:
        session.continue_to_exercises()

    logger.info(
        "Started session %s: %d words, %d min, kinds=%s",
        session.id,
        len(session.pool),
        duration,
        ",".join(k.value for k in session.kinds),
    )
    return session
