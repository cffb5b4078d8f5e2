"""SQLAlchemy ORM models for the drill history database."""

from backend.models.base import Base
from backend.models.drill_session import DrillSessionRecord
from backend.models.outcome_log import OutcomeLog

__all__ = ["Base", "DrillSessionRecord", "OutcomeLog"]
