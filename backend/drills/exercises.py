"""Exercise content: what the learner sees for a generated exercise, and answer checking.

Builders are pure functions of the ExerciseSpec, the word pool and a random
source. All answer comparison is diacritic-insensitive, so "rosa, rosae"
is accepted for "rosa, rosae" with or without macrons.
"""

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass

from backend.config import settings
from backend.drills.generator import ExerciseSpec, RandomSource
from backend.drills.kinds import DrillKind, QuestionKind
from backend.vocab.matching import equals
from backend.vocab.word import Declension, WordRecord

logger = logging.getLogger(__name__)

DECLENSION_LABELS: dict[str, str] = {
    Declension.FIRST.value: "Primera declinación",
    Declension.SECOND.value: "Segunda declinación",
    Declension.THIRD.value: "Tercera declinación",
    Declension.FOURTH.value: "Cuarta declinación",
    Declension.FIFTH.value: "Quinta declinación",
}

# (title, instruction) shown above each framing
QUESTION_TEXT: dict[QuestionKind, tuple[str, str]] = {
    QuestionKind.LATIN_TO_SPANISH: ("Traducción al Español", "Selecciona la traducción correcta"),
    QuestionKind.SPANISH_TO_LATIN: ("Traducción al Latín", "Selecciona la palabra latina correcta"),
    QuestionKind.DECLENSION: ("Identificar Declinación", "Selecciona la declinación correcta"),
}


@dataclass(frozen=True)
class ChoiceExercise:
    """A multiple-choice question ready to display."""

    exercise_id: str
    kind: DrillKind
    question_kind: QuestionKind
    title: str
    instruction: str
    prompt: str
    options: tuple[str, ...]
    answer: str

    def is_correct(self, selected: str) -> bool:
        return equals(selected, self.answer)


@dataclass(frozen=True)
class TypedExercise:
    """A free-input question: type the nominative and genitive of a word."""

    exercise_id: str
    kind: DrillKind
    title: str
    instruction: str
    prompt: str
    answer: str


@dataclass(frozen=True)
class TypedAnswerCheck:
    """Per-field result of checking a typed answer."""

    nominative_correct: bool
    genitive_correct: bool
    expected: str

    @property
    def is_correct(self) -> bool:
        return self.nominative_correct and self.genitive_correct


def correct_answer(word: WordRecord, question_kind: QuestionKind) -> str:
    """Return the display text of the correct option for a translation framing."""
    if question_kind is QuestionKind.SPANISH_TO_LATIN:
        return word.dictionary_form
    return word.translation


def question_prompt(word: WordRecord, question_kind: QuestionKind) -> str:
    """Return the text the learner is asked about."""
    if question_kind is QuestionKind.SPANISH_TO_LATIN:
        return word.translation
    return word.dictionary_form


def _translation_distractors(
    word: WordRecord,
    question_kind: QuestionKind,
    pool: Sequence[WordRecord],
    needed: int,
    used: set[str],
    rng: RandomSource,
) -> list[str]:
    candidates = [w for w in pool if w.id != word.id]
    rng.shuffle(candidates)

    distractors: list[str] = []
    for other in candidates:
        if len(distractors) >= needed:
            break
        value = correct_answer(other, question_kind)
        if value not in used:
            distractors.append(value)
            used.add(value)

    # Pool too small for real distractors: pad with obvious placeholders
    while len(distractors) < needed:
        n = len(distractors) + 2
        if question_kind is QuestionKind.SPANISH_TO_LATIN:
            distractors.append(f"Verbum{n}, verbi{n}")
        else:
            distractors.append(f"opción {n}")
    return distractors


def build_multiple_choice(
    spec: ExerciseSpec,
    pool: Sequence[WordRecord],
    rng: RandomSource | None = None,
    option_count: int | None = None,
) -> ChoiceExercise:
    """Build a translation question for a spec.

    Distractors are drawn from other words in the pool, padded with
    placeholders when the pool is too small.
    """
    rng = rng or random.Random()
    option_count = settings.mcq_option_count if option_count is None else option_count
    question_kind = spec.question_kind or QuestionKind.LATIN_TO_SPANISH
    word = spec.word

    answer = correct_answer(word, question_kind)
    needed = max(0, option_count - 1)

    distractors = _translation_distractors(word, question_kind, pool, needed, {answer}, rng)

    options = [answer, *distractors]
    rng.shuffle(options)

    title, instruction = QUESTION_TEXT[question_kind]
    return ChoiceExercise(
        exercise_id=spec.id,
        kind=spec.kind,
        question_kind=question_kind,
        title=title,
        instruction=instruction,
        prompt=question_prompt(word, question_kind),
        options=tuple(options),
        answer=answer,
    )


def build_declension_choice(spec: ExerciseSpec) -> ChoiceExercise:
    """Build the identify-the-declension question: all five declensions, in order."""
    title, instruction = QUESTION_TEXT[QuestionKind.DECLENSION]
    return ChoiceExercise(
        exercise_id=spec.id,
        kind=spec.kind,
        question_kind=QuestionKind.DECLENSION,
        title=title,
        instruction=instruction,
        prompt=spec.word.dictionary_form,
        options=tuple(DECLENSION_LABELS.values()),
        answer=DECLENSION_LABELS.get(spec.word.declension, spec.word.declension),
    )


def build_typed(spec: ExerciseSpec) -> TypedExercise:
    return TypedExercise(
        exercise_id=spec.id,
        kind=spec.kind,
        title="Escribe la palabra latina",
        instruction="Escribe el nominativo y el genitivo",
        prompt=spec.word.translation,
        answer=spec.word.dictionary_form,
    )


def build_exercise(
    spec: ExerciseSpec,
    pool: Sequence[WordRecord],
    rng: RandomSource | None = None,
    option_count: int | None = None,
) -> ChoiceExercise | TypedExercise:
    """Build the displayable content for any exercise kind."""
    if spec.kind is DrillKind.MULTIPLE_CHOICE:
        return build_multiple_choice(spec, pool, rng=rng, option_count=option_count)
    if spec.kind is DrillKind.MULTIPLE_CHOICE_DECLENSION:
        return build_declension_choice(spec)
    return build_typed(spec)


def check_typed_answer(word: WordRecord, nominative: str, genitive: str) -> TypedAnswerCheck:
    """Check a typed nominative/genitive pair, ignoring case and macrons."""
    return TypedAnswerCheck(
        nominative_correct=equals(nominative, word.nominative),
        genitive_correct=equals(genitive, word.genitive),
        expected=word.dictionary_form,
    )


def split_dictionary_form(text: str) -> tuple[str, str]:
    """Split 'rosa, rosae' into its two forms. A missing genitive is empty."""
    nominative, _, genitive = text.partition(",")
    return nominative.strip(), genitive.strip()
