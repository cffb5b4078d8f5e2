"""Random exercise generation.

One call produces one ExerciseSpec: a uniformly random word from the pool,
a uniformly random kind from the enabled set and, for kinds with several
framings, a uniformly random framing. Consecutive draws are independent,
so the same word may come up twice in a row.
"""

import logging
import random
import time
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from backend.drills.kinds import QUESTION_KINDS, DrillKind, QuestionKind
from backend.vocab.word import WordRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Seconds since the epoch, or any other monotonically increasing clock.
TimeSource = Callable[[], float]


class RandomSource(Protocol):
    """The subset of ``random.Random`` the drill engine draws from."""

    def choice(self, seq: Sequence[T]) -> T: ...

    def shuffle(self, x: list) -> None: ...

    def sample(self, population: Sequence[T], k: int) -> list[T]: ...


def _new_exercise_id() -> str:
    return f"drill_{uuid.uuid4().hex}"


@dataclass(frozen=True)
class ExerciseSpec:
    """A generated exercise, immutable once created."""

    kind: DrillKind
    word: WordRecord
    question_kind: QuestionKind | None = None
    created_at: float = field(default_factory=time.time)
    id: str = field(default_factory=_new_exercise_id)


def generate_exercise(
    pool: Sequence[WordRecord],
    kinds: Sequence[DrillKind],
    rng: RandomSource | None = None,
    now: TimeSource = time.time,
) -> ExerciseSpec:
    """Generate one random exercise from a word pool and enabled kinds.

    Args:
        pool: Words to draw from. Must be non-empty.
        kinds: Enabled exercise kinds. Must be non-empty.
        rng: Random source (defaults to the module-level generator).
        now: Clock used for the creation timestamp.

    Returns:
        A fresh ExerciseSpec with a unique id.

    Raises:
        ValueError: If the pool or the kind set is empty.
    """
    if not pool:
        raise ValueError("Cannot generate an exercise from an empty word pool")
    if not kinds:
        raise ValueError("Cannot generate an exercise without an enabled exercise kind")

    rng = rng or random

    word = rng.choice(pool)
    kind = rng.choice(kinds)

    question_kind = None
    framings = QUESTION_KINDS.get(kind)
    if framings:
        question_kind = rng.choice(framings)

    spec = ExerciseSpec(kind=kind, word=word, question_kind=question_kind, created_at=now())
    logger.debug("Generated %s for %s (%s)", kind.value, word.id, question_kind)
    return spec
