"""
Game policy model - administrator-authored play rules.
"""

from typing import Any, Dict

from sqlalchemy import JSON, Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from playgate.kernel.models.base import Base, TimestampMixin


class GamePolicy(Base, TimestampMixin):
    """
    A named rule with conditions, resulting actions and a priority.

    Lower priority is evaluated first; ties are broken by ascending id.
    rule_type is stored as free text so that rule types registered by
    extensions can be persisted without a schema change.
    """

    __tablename__ = "game_policies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    rule_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    conditions: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    actions: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    __table_args__ = (
        Index("ix_game_policies_active_priority", "active", "priority", "id"),
    )
