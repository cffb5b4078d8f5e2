"""Timed drill engine: generation, lookahead queue, clock, results and sessions."""

from backend.drills.clock import ClockState, SessionClock
from backend.drills.generator import ExerciseSpec, generate_exercise
from backend.drills.kinds import DrillKind, QuestionKind
from backend.drills.queue import DrillQueue, QueueExhaustedError
from backend.drills.results import ExerciseOutcome, ResultAccumulator, Statistics
from backend.drills.session import (
    DrillSession,
    EndReason,
    SessionClosedError,
    SessionPhase,
    SessionStateError,
    SessionSummary,
    start_session,
)

__all__ = [
    "ClockState",
    "DrillKind",
    "DrillQueue",
    "DrillSession",
    "EndReason",
    "ExerciseOutcome",
    "ExerciseSpec",
    "QuestionKind",
    "QueueExhaustedError",
    "ResultAccumulator",
    "SessionClock",
    "SessionClosedError",
    "SessionPhase",
    "SessionStateError",
    "SessionSummary",
    "Statistics",
    "generate_exercise",
    "start_session",
]
