from datetime import UTC, datetime
from pathlib import Path

from pydantic_settings import BaseSettings

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    Keeps datetimes naive so they stay compatible with SQLite
    (which doesn't store tz info).
    """
    return datetime.now(UTC).replace(tzinfo=None)


class Settings(BaseSettings):
    app_name: str = "Latin Drill"
    database_url: str = f"sqlite+aiosqlite:///{DATA_DIR / 'latin_drill.db'}"
    vocabulary_path: str = str(DATA_DIR / "vocabulary.json")
    drill_lookahead: int = 5
    tick_interval_seconds: float = 1.0
    session_durations: list[int] = [5, 10, 15]  # minutes offered to the learner
    default_duration_minutes: int = 5
    mcq_option_count: int = 4
    min_pool_size: int = 1
    session_ttl_seconds: int = 7200  # 2 hours
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    debug: bool = False

    model_config = {"env_prefix": "LATIN_DRILL_", "env_file": ".env"}


settings = Settings()
