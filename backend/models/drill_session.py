"""Finished drill session record."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.models.base import Base, TimestampMixin


class DrillSessionRecord(Base, TimestampMixin):
    """One completed session with its final statistics."""

    __tablename__ = "drill_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # Session UUID
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    drill_kinds: Mapped[str] = mapped_column(Text, nullable=False)  # JSON array of kind names
    word_count: Mapped[int] = mapped_column(Integer, nullable=False)
    end_reason: Mapped[str] = mapped_column(String(20), nullable=False)  # expired, ended_by_user
    total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    correct: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    incorrect: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    skipped: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    accuracy: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # Percent of attempted
    started_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    ended_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    outcomes: Mapped[list["OutcomeLog"]] = relationship(  # type: ignore[name-defined] # noqa: F821
        back_populates="session", order_by="OutcomeLog.position"
    )
