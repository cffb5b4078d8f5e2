"""Vocabulary loader and query service.

The vocabulary is a static JSON dataset bundled with the app. It is loaded
once into immutable WordRecords and every query works on that in-memory
collection.
"""

import json
import logging
import random
from pathlib import Path

from backend.config import settings
from backend.vocab.matching import VocabularyFilter, filter_words, rank
from backend.vocab.word import Declension, WordRecord

logger = logging.getLogger(__name__)


class VocabularyService:
    """Read-only access to the vocabulary collection."""

    def __init__(self, words: list[WordRecord]) -> None:
        """Initialize the service with an ordered word collection."""
        self._words: tuple[WordRecord, ...] = tuple(words)
        self._by_id: dict[str, WordRecord] = {w.id: w for w in self._words}
        if len(self._by_id) != len(self._words):
            logger.warning(
                "Vocabulary contains duplicate ids: %d words, %d unique",
                len(self._words),
                len(self._by_id),
            )

    @classmethod
    def from_file(cls, path: Path | str) -> "VocabularyService":
        """Load a normalized vocabulary JSON file."""
        path = Path(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        words = [WordRecord.from_dict(entry) for entry in data]
        logger.info("Loaded %d words from %s", len(words), path)
        return cls(words)

    def __len__(self) -> int:
        return len(self._words)

    def all_words(self) -> list[WordRecord]:
        """Return every word, in collection order."""
        return list(self._words)

    def get_by_id(self, word_id: str) -> WordRecord | None:
        return self._by_id.get(word_id)

    def get_by_ids(self, word_ids: list[str]) -> list[WordRecord]:
        """Return the words with the given ids, in collection order."""
        wanted = set(word_ids)
        return [w for w in self._words if w.id in wanted]

    def filter(self, criteria: VocabularyFilter) -> list[WordRecord]:
        return filter_words(self._words, criteria)

    def search(self, query: str) -> list[WordRecord]:
        """Return words ranked by relevance to a free-text query."""
        return rank(self._words, query)

    def random_words(
        self,
        count: int,
        criteria: VocabularyFilter | None = None,
        rng: random.Random | None = None,
    ) -> list[WordRecord]:
        """Pick up to ``count`` distinct words at random.

        Never returns more words than the (filtered) pool holds.
        """
        rng = rng or random.Random()
        pool = self.filter(criteria) if criteria else list(self._words)
        return rng.sample(pool, min(max(count, 0), len(pool)))

    def by_declension(self) -> dict[str, list[WordRecord]]:
        """Group words by declension. Every declension has an entry, even if empty."""
        grouped: dict[str, list[WordRecord]] = {d.value: [] for d in Declension}
        for word in self._words:
            group = grouped.get(word.declension)
            if group is not None:
                group.append(word)
        return grouped

    def statistics(self) -> dict:
        """Summarize the collection by declension and gender."""
        by_declension: dict[str, int] = {}
        by_gender: dict[str, int] = {}
        with_meanings = 0

        for word in self._words:
            by_declension[word.declension] = by_declension.get(word.declension, 0) + 1
            by_gender[word.gender] = by_gender.get(word.gender, 0) + 1
            if word.additional_meanings:
                with_meanings += 1

        return {
            "total_words": len(self._words),
            "by_declension": by_declension,
            "by_gender": by_gender,
            "with_additional_meanings": with_meanings,
        }


_service: VocabularyService | None = None


def get_vocabulary() -> VocabularyService:
    """Return the process-wide vocabulary, loading it on first use."""
    global _service
    if _service is None:
        _service = VocabularyService.from_file(settings.vocabulary_path)
    return _service
