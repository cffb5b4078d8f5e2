"""Append-only ledger of exercise outcomes and the statistics derived from it."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from backend.drills.kinds import DrillKind
from backend.vocab.word import WordRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExerciseOutcome:
    """How one exercise was resolved.

    A skip is recorded as not correct, with zero time spent, and is left
    out of the accuracy calculation.
    """

    exercise_id: str
    word: WordRecord
    kind: DrillKind
    is_correct: bool
    time_spent: int          # Whole seconds
    completed_at: float
    was_skipped: bool = False


@dataclass(frozen=True)
class Statistics:
    """Session statistics. Always recomputed from the ledger, never stored."""

    total: int = 0
    correct: int = 0
    incorrect: int = 0
    skipped: int = 0

    @property
    def attempted(self) -> int:
        return self.total - self.skipped

    @property
    def accuracy(self) -> int:
        """Percentage of attempted exercises answered correctly, halves rounded up."""
        if self.attempted <= 0:
            return 0
        return (self.correct * 200 + self.attempted) // (2 * self.attempted)

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "correct": self.correct,
            "incorrect": self.incorrect,
            "skipped": self.skipped,
            "attempted": self.attempted,
            "accuracy": self.accuracy,
        }


class ResultAccumulator:
    """Ledger of outcomes in the order they were recorded.

    Once frozen, further records are refused.
    """

    def __init__(self) -> None:
        self._ledger: list[ExerciseOutcome] = []
        self._seen_ids: set[str] = set()
        self._frozen = False

    def __len__(self) -> int:
        return len(self._ledger)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def record(self, outcome: ExerciseOutcome) -> None:
        """Append an outcome.

        Raises:
            RuntimeError: If the ledger is frozen.
            ValueError: If an outcome for the same exercise was already recorded.
        """
        if self._frozen:
            raise RuntimeError("Result ledger is frozen; the session has ended")
        if outcome.exercise_id in self._seen_ids:
            raise ValueError(f"Outcome for exercise {outcome.exercise_id} already recorded")

        self._ledger.append(outcome)
        self._seen_ids.add(outcome.exercise_id)

    def freeze(self) -> None:
        self._frozen = True

    def ledger(self) -> tuple[ExerciseOutcome, ...]:
        """Read-only view of the ledger, oldest first."""
        return tuple(self._ledger)

    def snapshot(self) -> Statistics:
        return compute_statistics(self._ledger)


def compute_statistics(outcomes: Sequence[ExerciseOutcome]) -> Statistics:
    """Derive statistics from a sequence of outcomes."""
    correct = incorrect = skipped = 0
    for outcome in outcomes:
        if outcome.was_skipped:
            skipped += 1
        elif outcome.is_correct:
            correct += 1
        else:
            incorrect += 1

    return Statistics(total=len(outcomes), correct=correct, incorrect=incorrect, skipped=skipped)
