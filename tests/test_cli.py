"""Tests for CLI commands (non-interactive paths)."""

import argparse

import pytest

from backend.database import async_session
from backend.drills.exercises import ChoiceExercise
from backend.drills.history import count_sessions, save_summary
from backend.drills.kinds import DrillKind, QuestionKind
from backend.drills.session import start_session
from latin_drill.__main__ import (
    _format_word,
    _read_choice,
    cmd_history,
    cmd_search,
    cmd_stats,
    cmd_words,
)


def _choice() -> ChoiceExercise:
    return ChoiceExercise(
        exercise_id="drill_1",
        kind=DrillKind.MULTIPLE_CHOICE,
        question_kind=QuestionKind.LATIN_TO_SPANISH,
        title="Traducción al Español",
        instruction="Selecciona la traducción correcta",
        prompt="rosa, rosae",
        options=("Guerra", "Rosa", "Rey", "Mano"),
        answer="Rosa",
    )


def test_read_choice_maps_numbers() -> None:
    content = _choice()
    assert _read_choice(content, "2") == "Rosa"
    assert _read_choice(content, "9") == "9"
    assert _read_choice(content, "rosa") == "rosa"


def test_format_word_highlights_query(pool) -> None:
    line = _format_word(pool[0], "ros")
    assert "[ros]a" in line
    assert "Rosa" in line


def test_search_prints_ranked_words(capsys) -> None:
    cmd_search(argparse.Namespace(text="nino", limit=5))
    out = capsys.readouterr().out
    assert "puer" in out
    assert "Niño" in out


def test_search_without_results(capsys) -> None:
    cmd_search(argparse.Namespace(text="zzzz", limit=5))
    assert "No words match" in capsys.readouterr().out


def test_words_filter(capsys) -> None:
    cmd_words(argparse.Namespace(declension=["5th"], gender=None, query=""))
    out = capsys.readouterr().out
    assert "4 words" in out
    assert "fidēs" in out


def test_stats(capsys) -> None:
    cmd_stats(argparse.Namespace())
    out = capsys.readouterr().out
    assert "24" in out
    assert "3rd declension:" in out


@pytest.mark.asyncio
async def test_history_lists_saved_sessions(db_ready, pool, rng, capsys) -> None:
    session = start_session(pool, [DrillKind.TYPE_LATIN_WORD], 5, rng=rng, skip_review=True)
    session.answer(True)
    summary = session.end_session()

    async with async_session() as db:
        before = await count_sessions(db)
        await save_summary(db, summary)
        assert await count_sessions(db) == before + 1

    await cmd_history(argparse.Namespace(limit=50))
    out = capsys.readouterr().out
    assert "ended_by_user" in out
    assert "typeLatinWord" in out
