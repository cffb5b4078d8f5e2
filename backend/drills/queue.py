"""Self-refilling lookahead queue of upcoming exercises.

Unlike a finite pre-shuffled deck, the queue regenerates one exercise for
every exercise taken, so a timed session can run for as long as its clock
allows regardless of pool size.
"""

import logging
import time
from collections import deque
from collections.abc import Sequence

from backend.config import settings
from backend.drills.generator import ExerciseSpec, RandomSource, TimeSource, generate_exercise
from backend.drills.kinds import DrillKind
from backend.vocab.word import WordRecord

logger = logging.getLogger(__name__)


class QueueExhaustedError(RuntimeError):
    """Raised when an exercise is requested from an empty queue."""


class DrillQueue:
    """A buffer of pre-generated exercises kept at a fixed length."""

    def __init__(
        self,
        pool: Sequence[WordRecord],
        kinds: Sequence[DrillKind],
        lookahead: int | None = None,
        rng: RandomSource | None = None,
        now: TimeSource = time.time,
    ) -> None:
        """Create an empty queue. Call ``initialize`` to fill it.

        The pool and kinds are copied, never mutated.
        """
        lookahead = settings.drill_lookahead if lookahead is None else lookahead
        if lookahead < 1:
            raise ValueError(f"Lookahead must be at least 1, got {lookahead}")

        self._pool: tuple[WordRecord, ...] = tuple(pool)
        self._kinds: tuple[DrillKind, ...] = tuple(kinds)
        self._rng = rng
        self._now = now
        self.lookahead = lookahead
        self._buffer: deque[ExerciseSpec] = deque()
        self._closed = False

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def pending(self) -> list[ExerciseSpec]:
        """Snapshot of the buffered exercises, next one first."""
        return list(self._buffer)

    def _generate(self) -> ExerciseSpec:
        return generate_exercise(self._pool, self._kinds, rng=self._rng, now=self._now)

    def initialize(self) -> None:
        """Fill the buffer to the lookahead length.

        Raises:
            ValueError: If the pool or kinds are empty.
        """
        while len(self._buffer) < self.lookahead:
            self._buffer.append(self._generate())
        logger.debug("Drill queue initialized with %d exercises", len(self._buffer))

    def take_next(self) -> ExerciseSpec:
        """Pop the head of the buffer and generate a replacement.

        Raises:
            QueueExhaustedError: If the buffer is empty, which means the
                queue was never initialized or was already closed.
        """
        if not self._buffer:
            raise QueueExhaustedError("Drill queue is empty; was it initialized?")

        spec = self._buffer.popleft()
        if not self._closed:
            self._buffer.append(self._generate())
        return spec

    def close(self) -> None:
        """Stop refilling; used once the session has ended."""
        self._closed = True

    def is_exhausted(self) -> bool:
        """Return True if nothing is buffered and nothing more can be generated."""
        return not self._buffer and (self._closed or not self._pool or not self._kinds)
