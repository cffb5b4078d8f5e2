"""Tests for the drill session orchestrator."""

import random

import pytest

from backend.drills.clock import ClockState, SessionClock
from backend.drills.kinds import DrillKind
from backend.drills.session import (
    DrillSession,
    EndReason,
    SessionClosedError,
    SessionPhase,
    SessionStateError,
    start_session,
)

MC = [DrillKind.MULTIPLE_CHOICE]


@pytest.fixture
def session(pool, rng, fake_time) -> DrillSession:
    return start_session(pool, MC, 1, rng=rng, time_source=fake_time, skip_review=True)


# --- Lifecycle ---


class TestLifecycle:
    def test_starts_in_review_with_running_clock(self, pool, rng, fake_time) -> None:
        s = start_session(pool, MC, 5, rng=rng, time_source=fake_time)
        assert s.phase is SessionPhase.REVIEW
        assert s.current is None
        assert s.remaining_seconds() == 300
        assert s.clock.state is ClockState.RUNNING
        assert s.pending == 5

    def test_continue_presents_first_exercise(self, pool, rng, fake_time) -> None:
        s = start_session(pool, MC, 5, rng=rng, time_source=fake_time)
        spec = s.continue_to_exercises()
        assert s.phase is SessionPhase.EXERCISES
        assert s.current is spec
        assert spec.word in pool
        # Lookahead refilled after the first take
        assert s.pending == 5

    def test_continue_twice_rejected(self, session) -> None:
        with pytest.raises(SessionStateError):
            session.continue_to_exercises()

    def test_answer_during_review_rejected(self, pool, rng, fake_time) -> None:
        s = start_session(pool, MC, 5, rng=rng, time_source=fake_time)
        with pytest.raises(SessionStateError):
            s.answer(True)
        with pytest.raises(SessionStateError):
            s.skip()

    def test_default_duration(self, pool, rng) -> None:
        s = start_session(pool, MC, rng=rng)
        assert s.duration_minutes == 5
        assert s.remaining_seconds() == 300

    def test_invalid_configuration(self, pool) -> None:
        with pytest.raises(ValueError):
            DrillSession([], MC, 5)
        with pytest.raises(ValueError):
            DrillSession(pool, [], 5)
        with pytest.raises(ValueError):
            DrillSession(pool, MC, 0)

    def test_duplicate_kinds_collapsed(self, pool, rng) -> None:
        s = start_session(pool, [DrillKind.TYPE_LATIN_WORD, DrillKind.TYPE_LATIN_WORD, *MC], 1, rng=rng)
        assert s.kinds == (DrillKind.TYPE_LATIN_WORD, DrillKind.MULTIPLE_CHOICE)

    def test_single_word_pool_repeats(self, pool, rng) -> None:
        s = start_session(pool[:1], MC, 1, rng=rng, skip_review=True)
        for _ in range(10):
            assert s.current.word is pool[0]
            s.answer(True)


# --- Answers ---


class TestAnswers:
    def test_answer_records_elapsed_time(self, session, fake_time) -> None:
        first = session.current
        fake_time.advance(4.7)
        outcome = session.answer(True)
        assert outcome.exercise_id == first.id
        assert outcome.word is first.word
        assert outcome.time_spent == 4
        assert outcome.is_correct
        assert session.current is not first

    def test_skip_records_zero_time(self, session, fake_time) -> None:
        fake_time.advance(9)
        outcome = session.skip()
        assert outcome.was_skipped
        assert not outcome.is_correct
        assert outcome.time_spent == 0

    def test_each_exercise_resolved_once(self, session) -> None:
        ids = []
        for i in range(12):
            ids.append(session.current.id)
            session.answer(i % 2 == 0)
        assert [o.exercise_id for o in session.ledger()] == ids
        assert len(set(ids)) == 12

    def test_live_statistics(self, session) -> None:
        session.answer(True)
        session.answer(False)
        session.skip()
        stats = session.statistics()
        assert (stats.total, stats.correct, stats.incorrect, stats.skipped) == (3, 1, 1, 1)
        assert stats.accuracy == 50

    def test_progress(self, session) -> None:
        assert session.progress == 0
        session.answer(True)
        assert 0 < session.progress < 1

    def test_progress_complete_after_end(self, session) -> None:
        for _ in range(3):
            session.answer(True)
        session.end_session()
        assert session.progress == 1.0


# --- Ending ---


class TestEnding:
    def test_expiry_ends_session(self, pool, rng, fake_time) -> None:
        s = start_session(pool, MC, 1, rng=rng, time_source=fake_time, skip_review=True)
        s.answer(True)
        s.answer(True)
        s.answer(True)
        s.skip()
        s.clock.advance(60)

        assert s.phase is SessionPhase.SUMMARY
        summary = s.summary
        assert summary.reason is EndReason.EXPIRED
        stats = summary.statistics
        assert (stats.total, stats.correct, stats.incorrect, stats.skipped) == (4, 3, 0, 1)
        assert stats.attempted == 3
        assert stats.accuracy == 100
        assert len(summary.ledger) == 4

        # Answers after expiry are discarded
        assert s.answer(True) is None
        assert s.skip() is None
        assert len(s.ledger()) == 4

    def test_user_end(self, session) -> None:
        session.answer(False)
        session.answer(False)
        summary = session.end_session()
        assert session.phase is SessionPhase.SUMMARY
        assert summary.reason is EndReason.ENDED_BY_USER
        assert summary.statistics.total == 2
        assert summary.statistics.incorrect == 2
        assert summary.statistics.accuracy == 0
        assert session.clock.state is ClockState.STOPPED

    def test_user_end_stops_timer(self, session) -> None:
        session.end_session()
        session.clock.advance(120)
        assert session.summary.reason is EndReason.ENDED_BY_USER

    def test_end_from_review(self, pool, rng) -> None:
        s = start_session(pool, MC, 1, rng=rng)
        summary = s.end_session()
        assert summary.statistics.total == 0

    def test_expiry_during_review(self, pool, rng) -> None:
        s = start_session(pool, MC, 1, rng=rng)
        s.clock.advance(60)
        assert s.summary.reason is EndReason.EXPIRED
        with pytest.raises(SessionClosedError):
            s.continue_to_exercises()

    def test_end_twice_rejected(self, session) -> None:
        session.end_session()
        with pytest.raises(SessionClosedError):
            session.end_session()

    def test_late_answer_is_logged(self, session, caplog) -> None:
        session.end_session()
        assert session.answer(True) is None
        assert "Discarding answer" in caplog.text

    def test_on_end_fires_once(self, session) -> None:
        received = []
        session.on_end(received.append)
        session.end_session()
        session.clock.advance(60)
        assert len(received) == 1
        assert received[0] is session.summary

    def test_summary_timestamps(self, session, fake_time) -> None:
        fake_time.advance(30)
        summary = session.end_session()
        assert summary.ended_at - summary.started_at == 30
        assert summary.word_count == 5
        assert summary.kinds == (DrillKind.MULTIPLE_CHOICE,)

    def test_pause_holds_clock(self, session) -> None:
        session.pause()
        session.clock.advance(120)
        assert not session.is_over
        session.resume()
        session.clock.advance(60)
        assert session.is_over


# --- Isolation ---


class TestIsolation:
    def test_sessions_do_not_share_state(self, pool) -> None:
        a = start_session(pool, MC, 1, rng=random.Random(1), skip_review=True)
        b = start_session(pool, MC, 1, rng=random.Random(1), skip_review=True)
        a.answer(True)
        a.clock.advance(60)
        assert a.is_over
        assert not b.is_over
        assert b.statistics().total == 0
        assert a.id != b.id

    def test_injected_clock(self, pool, rng) -> None:
        clock = SessionClock()
        s = start_session(pool, MC, 2, rng=rng, clock=clock)
        assert s.clock is clock
        assert clock.total_seconds == 120
