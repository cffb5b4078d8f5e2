"""Shared fixtures. Points the app at a throwaway database before anything imports it."""

import os
import tempfile

_tmp_dir = tempfile.mkdtemp(prefix="latin_drill_test_")
os.environ.setdefault("LATIN_DRILL_DATABASE_URL", f"sqlite+aiosqlite:///{_tmp_dir}/test.db")

import random  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from backend.vocab.word import WordRecord  # noqa: E402


class FakeTime:
    """A manually advanced time source."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_word(
    word_id: str = "rosa_0001",
    nominative: str = "rosa",
    genitive: str = "rosae",
    declension: str = "1st",
    gender: str = "feminine",
    translation: str = "Rosa",
    additional_meanings: tuple[str, ...] = (),
) -> WordRecord:
    return WordRecord(
        id=word_id,
        nominative=nominative,
        genitive=genitive,
        declension=declension,
        gender=gender,
        translation=translation,
        additional_meanings=additional_meanings,
    )


def make_pool(size: int = 5) -> list[WordRecord]:
    words = [
        make_word("rosa_0001", "rosa", "rosae", "1st", "feminine", "Rosa"),
        make_word("dominus_0002", "dominus", "dominī", "2nd", "masculine", "Señor", ("dueño",)),
        make_word("bellum_0003", "bellum", "bellī", "2nd", "neuter", "Guerra"),
        make_word("rex_0004", "rēx", "rēgis", "3rd", "masculine", "Rey"),
        make_word("manus_0005", "manus", "manūs", "4th", "feminine", "Mano", ("tropa",)),
        make_word("res_0006", "rēs", "reī", "5th", "feminine", "Cosa", ("asunto",)),
        make_word("puer_0007", "puer", "puerī", "2nd", "masculine", "Niño", ("muchacho",)),
    ]
    return words[:size]


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def pool() -> list[WordRecord]:
    return make_pool()


@pytest_asyncio.fixture
async def db_ready():
    """Create tables, and drop pooled connections afterwards so each test loop starts clean."""
    from backend.database import engine, init_db

    await init_db()
    yield
    await engine.dispose()


@pytest.fixture
def word_factory():
    """Build ad-hoc WordRecords inside a test."""
    return make_word
