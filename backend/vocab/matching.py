"""Diacritic-insensitive matching and relevance ranking for vocabulary search.

Every comparison in the app goes through ``normalize`` so that "María",
"MARIA" and "maria" are the same word, as are "rosā" and "rosa".
Search-as-you-type input passes through partial and empty states all the
time, so nothing here raises on a bad query: it degrades to an empty
ranking or an unrestricted filter instead.
"""

import logging
import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from backend.vocab.word import WordRecord

logger = logging.getLogger(__name__)

# Letters that must fold to a base letter even when a font or input method
# delivers them precomposed without a decomposition mapping.
FOLD_TABLE = str.maketrans({"ñ": "n", "ā": "a", "ē": "e", "ī": "i", "ō": "o", "ū": "u", "ȳ": "y"})

# Rank weights: headword checks are exclusive of each other, as are the
# translation checks. Second form and alternate meanings add on top.
HEADWORD_EXACT = 100
HEADWORD_PREFIX = 50
HEADWORD_SUBSTRING = 25
TRANSLATION_EXACT = 75
TRANSLATION_SUBSTRING = 20
SECOND_FORM_SUBSTRING = 15
ALTERNATE_MEANING_SUBSTRING = 10


def _is_combining(char: str) -> bool:
    # Combining Diacritical Marks block: acute, grave, macron, dieresis, tilde...
    return "\u0300" <= char <= "\u036f"


def normalize(text: str) -> str:
    """Lowercase, strip diacritics and surrounding whitespace.

    Idempotent: ``normalize(normalize(x)) == normalize(x)``.
    """
    if not text:
        return ""
    lowered = text.lower().translate(FOLD_TABLE)
    decomposed = unicodedata.normalize("NFD", lowered)
    stripped = "".join(ch for ch in decomposed if not _is_combining(ch))
    return stripped.strip()


def matches_substring(field_value: str, query: str) -> bool:
    """Return True if the normalized field contains the normalized query.

    An empty query matches everything.
    """
    return normalize(query) in normalize(field_value)


def matches_prefix(field_value: str, query: str) -> bool:
    """Return True if the normalized field starts with the normalized query."""
    return normalize(field_value).startswith(normalize(query))


def equals(a: str, b: str) -> bool:
    """Compare two strings ignoring case and accents."""
    return normalize(a) == normalize(b)


def highlight(text: str, query: str) -> list[tuple[str, bool]]:
    """Split text into (segment, is_highlighted) parts around query matches.

    Offsets are computed on the normalized text, so this assumes
    normalization keeps one character per original character, which holds
    for the precomposed Latin and Spanish letters in the vocabulary.
    """
    if not text or not normalize(query):
        return [(text or "", False)]

    norm_text = normalize(text)
    norm_query = normalize(query)
    # normalize() trims, so account for leading whitespace in the original
    offset = len(text) - len(text.lstrip())
    if len(norm_text) != len(text.strip()):
        logger.debug("Cannot align highlight for %r, returning plain text", text)
        return [(text, False)]

    parts: list[tuple[str, bool]] = []
    last = 0
    index = norm_text.find(norm_query)
    while index != -1:
        start = index + offset
        end = start + len(norm_query)
        if start > last:
            parts.append((text[last:start], False))
        parts.append((text[start:end], True))
        last = end
        index = norm_text.find(norm_query, index + len(norm_query))

    if last < len(text):
        parts.append((text[last:], False))
    return parts


@dataclass(frozen=True)
class VocabularyFilter:
    """Criteria for ``filter_words``. Empty sets mean no restriction."""

    declensions: frozenset[str] = field(default_factory=frozenset)
    genders: frozenset[str] = field(default_factory=frozenset)
    query: str = ""

    @classmethod
    def build(
        cls,
        declensions: Iterable[str] | None = None,
        genders: Iterable[str] | None = None,
        query: str | None = None,
    ) -> "VocabularyFilter":
        """Build a filter from loosely-typed inputs (lists, None)."""
        return cls(
            declensions=frozenset(declensions or ()),
            genders=frozenset(genders or ()),
            query=query or "",
        )


def word_matches_query(word: WordRecord, query: str) -> bool:
    """Return True if any searchable field of the word contains the query."""
    return (
        matches_substring(word.nominative, query)
        or matches_substring(word.genitive, query)
        or matches_substring(word.translation, query)
        or any(matches_substring(meaning, query) for meaning in word.additional_meanings)
    )


def filter_words(words: Sequence[WordRecord], criteria: VocabularyFilter) -> list[WordRecord]:
    """Return the words satisfying every criterion, in collection order.

    Unknown declension or gender labels simply match nothing.
    """
    result = list(words)

    if criteria.declensions:
        result = [w for w in result if w.declension in criteria.declensions]

    if criteria.genders:
        result = [w for w in result if w.gender in criteria.genders]

    if criteria.query.strip():
        result = [w for w in result if word_matches_query(w, criteria.query)]

    return result


def score_word(word: WordRecord, query: str) -> int:
    """Compute the relevance score of a word for a free-text query."""
    norm_query = normalize(query)
    nominative = normalize(word.nominative)
    translation = normalize(word.translation)
    score = 0

    if nominative == norm_query:
        score += HEADWORD_EXACT
    elif nominative.startswith(norm_query):
        score += HEADWORD_PREFIX
    elif norm_query in nominative:
        score += HEADWORD_SUBSTRING

    if translation == norm_query:
        score += TRANSLATION_EXACT
    elif norm_query in translation:
        score += TRANSLATION_SUBSTRING

    if norm_query in normalize(word.genitive):
        score += SECOND_FORM_SUBSTRING

    if any(norm_query in normalize(m) for m in word.additional_meanings):
        score += ALTERNATE_MEANING_SUBSTRING

    return score


def rank(words: Sequence[WordRecord], query: str) -> list[WordRecord]:
    """Rank words by relevance to a query, best first.

    Zero-score words are dropped and ties keep collection order, so the
    result is reproducible for identical inputs. A blank query ranks nothing.
    """
    if not query or not query.strip():
        return []

    scored = [(score_word(word, query), word) for word in words]
    scored = [(score, word) for score, word in scored if score > 0]
    # sorted() is stable, so equal scores keep their original order
    scored = sorted(scored, key=lambda pair: pair[0], reverse=True)
    return [word for _, word in scored]
