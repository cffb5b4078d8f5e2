"""Word records and the fixed label enumerations they carry."""

import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class Declension(str, Enum):
    """The five Latin noun declensions."""

    FIRST = "1st"
    SECOND = "2nd"
    THIRD = "3rd"
    FOURTH = "4th"
    FIFTH = "5th"


class Gender(str, Enum):
    """Grammatical gender. COMMON covers words used as masculine or feminine."""

    MASCULINE = "masculine"
    FEMININE = "feminine"
    NEUTER = "neuter"
    COMMON = "common"


@dataclass(frozen=True)
class WordRecord:
    """A vocabulary entry supplied to the drill engine.

    Immutable for the lifetime of any session that uses it.
    """

    id: str
    nominative: str          # Headword
    genitive: str            # Second canonical form, disambiguates the declension
    declension: str
    gender: str
    translation: str         # Primary Spanish translation
    additional_meanings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def dictionary_form(self) -> str:
        """Return the 'nominative, genitive' form used in prompts and options."""
        return f"{self.nominative}, {self.genitive}"

    @classmethod
    def from_dict(cls, data: dict) -> "WordRecord":
        """Build a record from a normalized vocabulary JSON entry."""
        return cls(
            id=str(data["id"]),
            nominative=data["nominative"],
            genitive=data.get("genitive", ""),
            declension=str(data.get("declension", "")),
            gender=normalize_gender(data.get("gender", "")),
            translation=data.get("spanishTranslation", data.get("translation", "")),
            additional_meanings=tuple(data.get("additionalMeanings", data.get("additional_meanings", []))),
        )

    def to_dict(self) -> dict:
        """Serialize back to the vocabulary JSON shape."""
        return {
            "id": self.id,
            "nominative": self.nominative,
            "genitive": self.genitive,
            "declension": self.declension,
            "gender": self.gender,
            "spanishTranslation": self.translation,
            "additionalMeanings": list(self.additional_meanings),
        }


def normalize_gender(raw: str) -> str:
    """Map free-form gender annotations onto the Gender enumeration.

    Mixed annotations ("masculine/feminine", "común", "adjective") become
    common; "neuter and masculine" is primarily neuter. Unknown values
    fall back to common.
    """
    lower = (raw or "").lower().strip()

    if "masculine" in lower and "feminine" in lower:
        return Gender.COMMON.value
    if lower in ("común", "comun", "common", "adjective"):
        return Gender.COMMON.value
    if lower == "neuter and masculine":
        return Gender.NEUTER.value
    if lower in ("masculine", "masculino"):
        return Gender.MASCULINE.value
    if lower in ("feminine", "femenino"):
        return Gender.FEMININE.value
    if lower in ("neuter", "neutro"):
        return Gender.NEUTER.value

    logger.warning("Unknown gender value %r, defaulting to common", raw)
    return Gender.COMMON.value
