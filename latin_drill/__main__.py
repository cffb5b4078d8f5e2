"""CLI interface for Latin Drill.

Usage:
    python -m latin_drill drill                     Start a timed drill session
    python -m latin_drill drill -m 10 -k typeLatinWord --declension 3rd
    python -m latin_drill search "nino"             Search the vocabulary
    python -m latin_drill words --gender neuter     List words by filter
    python -m latin_drill stats                     Vocabulary statistics
    python -m latin_drill history                   Past sessions
"""

import argparse
import asyncio
import json
import logging
import random
import time

from backend.config import settings
from backend.database import async_session, init_db
from backend.drills.clock import MonotonicTicker, format_mmss
from backend.drills.exercises import (
    ChoiceExercise,
    build_exercise,
    check_typed_answer,
    split_dictionary_form,
)
from backend.drills.history import recent_sessions, save_summary
from backend.drills.kinds import DrillKind
from backend.drills.session import DrillSession, SessionSummary, start_session
from backend.vocab.matching import VocabularyFilter, highlight
from backend.vocab.service import get_vocabulary
from backend.vocab.word import Declension, Gender, WordRecord

logger = logging.getLogger(__name__)


def _format_word(word: WordRecord, query: str = "") -> str:
    nominative = word.nominative
    if query:
        nominative = "".join(f"[{seg}]" if hit else seg for seg, hit in highlight(nominative, query))
    meanings = f" ({', '.join(word.additional_meanings)})" if word.additional_meanings else ""
    return f"  {nominative}, {word.genitive:<12} {word.declension:<4} {word.gender:<10} {word.translation}{meanings}"


def _read_choice(content: ChoiceExercise, response: str) -> str:
    """Map a numeric option to its text; anything else is taken literally."""
    if response.isdigit():
        idx = int(response) - 1
        if 0 <= idx < len(content.options):
            return content.options[idx]
    return response


def _print_summary(summary: SessionSummary) -> None:
    s = summary.statistics
    reason = "Time's up!" if summary.reason.value == "expired" else "Session ended."
    print(f"\n  {reason}")
    print("  Session Complete!")
    print(f"  {'Exercises:':<12} {s.total}")
    print(f"  {'Correct:':<12} {s.correct}")
    print(f"  {'Incorrect:':<12} {s.incorrect}")
    print(f"  {'Skipped:':<12} {s.skipped}")
    print(f"  {'Accuracy:':<12} {s.accuracy}%\n")


def _build_pool(args: argparse.Namespace) -> list[WordRecord]:
    vocabulary = get_vocabulary()
    criteria = VocabularyFilter.build(args.declension, args.gender, args.query)
    rng = random.Random(args.seed)
    if args.words:
        return vocabulary.random_words(args.words, criteria, rng=rng)
    return vocabulary.filter(criteria)


def _run_exercises(session: DrillSession, ticker: MonotonicTicker, rng: random.Random) -> None:
    while True:
        ticker.sync()
        spec = session.current
        if session.is_over or spec is None:
            return

        content = build_exercise(spec, session.pool, rng=rng)
        print(f"\n  [{format_mmss(session.remaining_seconds())}] {content.title}")
        print(f"  {content.instruction}: {content.prompt}")
        if isinstance(content, ChoiceExercise):
            for j, opt in enumerate(content.options, 1):
                print(f"    {j}. {opt}")

        response = input("\n  Your answer (s=skip, q=quit): ").strip()
        ticker.sync()

        if response.lower() == "q":
            if not session.is_over:
                session.end_session()
            return
        if response.lower() == "s":
            outcome = session.skip()
        elif isinstance(content, ChoiceExercise):
            outcome = session.answer(content.is_correct(_read_choice(content, response)))
        else:
            nominative, genitive = split_dictionary_form(response)
            outcome = session.answer(check_typed_answer(spec.word, nominative, genitive).is_correct)

        if outcome is None:
            print("  Time ran out before that answer; it was not counted.")
            return
        if outcome.was_skipped:
            print(f"  Skipped. Answer: {content.answer}")
        elif outcome.is_correct:
            print("  Correct!")
        else:
            print(f"  The correct answer was: {content.answer}")


async def cmd_drill(args: argparse.Namespace) -> None:
    """Run an interactive timed drill session."""
    await init_db()
    pool = _build_pool(args)
    if len(pool) < max(1, settings.min_pool_size):
        print("\n  No words match those filters. Try a wider selection.\n")
        return

    kinds = [DrillKind(k) for k in (args.kinds or [k.value for k in DrillKind])]
    rng = random.Random(args.seed)
    session = start_session(pool, kinds, args.minutes, rng=rng, time_source=time.time)
    ticker = MonotonicTicker(session.clock)
    ticker.start()

    print(f"\n  Drill Session: {len(pool)} words, {args.minutes} min")
    if not args.skip_review:
        print("\n  Review these words:\n")
        for word in session.pool:
            print(_format_word(word))
        if input("\n  Press Enter to start the exercises (q to quit): ").strip().lower() == "q":
            session.end_session()
        ticker.sync()

    if not session.is_over:
        session.continue_to_exercises()
        _run_exercises(session, ticker, rng)

    summary = session.summary
    _print_summary(summary)
    async with async_session() as db:
        await save_summary(db, summary)


def cmd_search(args: argparse.Namespace) -> None:
    """Search the vocabulary by relevance."""
    results = get_vocabulary().search(args.text)[: args.limit]
    if not results:
        print(f"\n  No words match '{args.text}'.\n")
        return
    print()
    for word in results:
        print(_format_word(word, args.text))
    print()


def cmd_words(args: argparse.Namespace) -> None:
    """List words matching filter criteria."""
    words = get_vocabulary().filter(VocabularyFilter.build(args.declension, args.gender, args.query))
    print(f"\n  {len(words)} words\n")
    for word in words:
        print(_format_word(word, args.query or ""))
    print()


def cmd_stats(args: argparse.Namespace) -> None:
    """Show vocabulary statistics."""
    stats = get_vocabulary().statistics()
    print("\n  Latin Drill Vocabulary")
    print(f"  {'Total words:':<24} {stats['total_words']}")
    for declension, count in sorted(stats["by_declension"].items()):
        print(f"  {declension + ' declension:':<24} {count}")
    for gender, count in sorted(stats["by_gender"].items()):
        print(f"  {gender.capitalize() + ':':<24} {count}")
    print(f"  {'With extra meanings:':<24} {stats['with_additional_meanings']}")
    print()


async def cmd_history(args: argparse.Namespace) -> None:
    """Show recently finished sessions."""
    await init_db()
    async with async_session() as db:
        records = await recent_sessions(db, limit=args.limit)

    if not records:
        print("\n  No sessions yet.\n")
        return
    print()
    for r in records:
        kinds = ", ".join(json.loads(r.drill_kinds))
        print(
            f"  {r.ended_at:%Y-%m-%d %H:%M}  {r.duration_minutes:>2} min  "
            f"{r.total:>3} ex  {r.accuracy:>3}%  ({r.end_reason}; {kinds})"
        )
    print()


def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--declension", action="append", choices=[d.value for d in Declension], help="Repeatable"
    )
    parser.add_argument("--gender", action="append", choices=[g.value for g in Gender], help="Repeatable")
    parser.add_argument("-q", "--query", default="", help="Free-text filter")


def main() -> None:
    """Entry point for the Latin Drill CLI application."""
    parser = argparse.ArgumentParser(
        prog="latin_drill",
        description="Timed Latin vocabulary drills",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # drill
    drill_parser = subparsers.add_parser("drill", help="Start a timed drill session")
    drill_parser.add_argument(
        "-m", "--minutes", type=int, default=settings.default_duration_minutes,
        choices=settings.session_durations, help="Session length in minutes",
    )
    drill_parser.add_argument(
        "-k", "--kinds", action="append", choices=[k.value for k in DrillKind],
        help="Exercise kind (repeatable, default: all)",
    )
    drill_parser.add_argument("-n", "--words", type=int, default=0, help="Drill N random words")
    drill_parser.add_argument("--skip-review", action="store_true", help="Go straight to exercises")
    drill_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    _add_filter_args(drill_parser)

    # search
    search_parser = subparsers.add_parser("search", help="Search the vocabulary")
    search_parser.add_argument("text", help="Latin or Spanish text, accents optional")
    search_parser.add_argument("-l", "--limit", type=int, default=10)

    # words
    words_parser = subparsers.add_parser("words", help="List words by filter")
    _add_filter_args(words_parser)

    # stats
    subparsers.add_parser("stats", help="Show vocabulary statistics")

    # history
    history_parser = subparsers.add_parser("history", help="Show past sessions")
    history_parser.add_argument("-l", "--limit", type=int, default=10)

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not args.command:
        parser.print_help()
        return

    # Vocabulary commands are synchronous; drill and history touch the DB.
    sync_map = {
        "search": cmd_search,
        "words": cmd_words,
        "stats": cmd_stats,
    }
    if args.command in sync_map:
        sync_map[args.command](args)
        return

    cmd_map = {
        "drill": cmd_drill,
        "history": cmd_history,
    }

    asyncio.run(cmd_map[args.command](args))


if __name__ == "__main__":
    main()
