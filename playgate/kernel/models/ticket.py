"""
Player ticket balance - per-user credit gating play under parent controls.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from playgate.kernel.models.base import Base


class PlayerTickets(Base):
    """Current ticket balance for a user."""

    __tablename__ = "player_tickets"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
