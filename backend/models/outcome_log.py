from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.models.base import Base


class OutcomeLog(Base):
    __tablename__ = "outcome_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(ForeignKey("drill_sessions.id"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)  # Ledger order within the session
    exercise_id: Mapped[str] = mapped_column(String(64), nullable=False)
    word_id: Mapped[str] = mapped_column(String(100), nullable=False)
    drill_kind: Mapped[str] = mapped_column(String(50), nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False)
    was_skipped: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    time_spent: Mapped[int] = mapped_column(Integer, nullable=False)  # Seconds
    completed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    session: Mapped["DrillSessionRecord"] = relationship(back_populates="outcomes")  # type: ignore[name-defined] # noqa: F821
