"""Vocabulary records, matching engine and the dataset service."""

from backend.vocab.matching import (
    VocabularyFilter,
    equals,
    filter_words,
    matches_prefix,
    matches_substring,
    normalize,
    rank,
)
from backend.vocab.service import VocabularyService, get_vocabulary
from backend.vocab.word import Declension, Gender, WordRecord

__all__ = [
    "Declension",
    "Gender",
    "VocabularyFilter",
    "VocabularyService",
    "WordRecord",
    "equals",
    "filter_words",
    "get_vocabulary",
    "matches_prefix",
    "matches_substring",
    "normalize",
    "rank",
]
