"""Exercise kinds and question framings."""

from enum import Enum


class DrillKind(str, Enum):
    """A category of drill the learner can enable for a session."""

    MULTIPLE_CHOICE = "multipleChoice"                        # Translation, either direction
    MULTIPLE_CHOICE_DECLENSION = "multipleChoiceDeclension"   # Identify the declension
    TYPE_LATIN_WORD = "typeLatinWord"                         # Type nominative and genitive


class QuestionKind(str, Enum):
    """Which framing of a question is asked."""

    LATIN_TO_SPANISH = "latinToSpanish"
    SPANISH_TO_LATIN = "spanishToLatin"
    DECLENSION = "declension"


# Framings the generator draws from, per kind. Kinds missing here have a
# single fixed framing and get no sub-question-kind.
QUESTION_KINDS: dict[DrillKind, tuple[QuestionKind, ...]] = {
    DrillKind.MULTIPLE_CHOICE: (QuestionKind.LATIN_TO_SPANISH, QuestionKind.SPANISH_TO_LATIN),
}


def parse_kinds(values: list[str]) -> list[DrillKind]:
    """Parse drill kind names, raising ValueError on unknown names."""
    return [DrillKind(v) for v in values]
