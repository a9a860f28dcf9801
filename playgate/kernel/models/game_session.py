"""
Game session model - one row per game played; source of daily play counters.
"""

from typing import Optional

from sqlalchemy import Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from playgate.kernel.models.base import Base, TimestampMixin


class GameSession(Base, TimestampMixin):
    """A single play session of a mini-game."""

    __tablename__ = "game_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    course_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    game_type: Mapped[str] = mapped_column(String(50), nullable=False)

    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # seconds
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_game_sessions_user_created", "user_id", "created_at"),
    )
