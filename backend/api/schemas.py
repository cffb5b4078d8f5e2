"""Pydantic schemas for API request/response models."""

from datetime import datetime

from pydantic import BaseModel, Field

from backend.drills.results import Statistics
from backend.vocab.word import WordRecord

# --- Words ---


class WordResponse(BaseModel):
    """A vocabulary entry."""

    id: str
    nominative: str
    genitive: str
    declension: str
    gender: str
    translation: str
    additional_meanings: list[str]

    @classmethod
    def from_word(cls, word: WordRecord) -> "WordResponse":
        return cls(
            id=word.id,
            nominative=word.nominative,
            genitive=word.genitive,
            declension=word.declension,
            gender=word.gender,
            translation=word.translation,
            additional_meanings=list(word.additional_meanings),
        )


# --- Session ---


class SessionStartRequest(BaseModel):
    """Request to start a drill session.

    Words are chosen either by id or by filter criteria (ids win).
    """

    word_ids: list[str] | None = None
    declensions: list[str] = []
    genders: list[str] = []
    query: str = ""
    drill_kinds: list[str] = Field(min_length=1)
    duration_minutes: int = Field(gt=0)
    skip_review: bool = False


class SessionStartResponse(BaseModel):
    """Response when starting a new drill session."""

    session_id: str
    phase: str
    word_count: int
    drill_kinds: list[str]
    duration_minutes: int
    remaining_seconds: int
    words: list[WordResponse]  # For the review phase


class ExerciseResponse(BaseModel):
    """The exercise currently shown to the learner."""

    exercise_id: str
    kind: str
    question_kind: str | None = None
    title: str
    instruction: str
    prompt: str
    options: list[str] | None = None  # For multiple choice kinds
    word_id: str
    remaining_seconds: int


class AnswerRequest(BaseModel):
    """Request to answer the current exercise.

    Either the client already assessed the answer (``is_correct``), or it
    sends the selected option / typed forms and the server assesses them.
    """

    exercise_id: str
    is_correct: bool | None = None
    response: str | None = None   # Selected option, or typed nominative
    genitive: str | None = None   # Typed genitive, for typeLatinWord


class StatisticsResponse(BaseModel):
    total: int
    correct: int
    incorrect: int
    skipped: int
    attempted: int
    accuracy: int

    @classmethod
    def from_stats(cls, stats: Statistics) -> "StatisticsResponse":
        return cls(**stats.as_dict())


class AnswerResponse(BaseModel):
    """Response after answering or skipping an exercise."""

    is_correct: bool
    was_skipped: bool
    correct_answer: str
    time_spent: int
    statistics: StatisticsResponse
    next_exercise: ExerciseResponse | None
    phase: str
    remaining_seconds: int


class SessionStatsResponse(BaseModel):
    """Live statistics for a session."""

    phase: str
    remaining_seconds: int
    progress: float
    statistics: StatisticsResponse


class OutcomeResponse(BaseModel):
    exercise_id: str
    word_id: str
    kind: str
    is_correct: bool
    was_skipped: bool
    time_spent: int


class SessionSummaryResponse(BaseModel):
    """Final results of an ended session."""

    session_id: str
    reason: str
    statistics: StatisticsResponse
    outcomes: list[OutcomeResponse]


# --- Stats ---


class VocabularyStatsResponse(BaseModel):
    total_words: int
    by_declension: dict[str, int]
    by_gender: dict[str, int]
    with_additional_meanings: int


class HistoryEntryResponse(BaseModel):
    """A persisted past session."""

    session_id: str
    duration_minutes: int
    drill_kinds: list[str]
    word_count: int
    end_reason: str
    total: int
    correct: int
    incorrect: int
    skipped: int
    accuracy: int
    started_at: datetime
    ended_at: datetime
