"""
Kernel Data Models

SQLAlchemy models for policies, game sessions, tickets and the
append-only question attempt log.
"""

from playgate.kernel.models.base import Base, CreatedAtMixin, TimestampMixin
from playgate.kernel.models.policy import GamePolicy
from playgate.kernel.models.attempt import QuestionAttempt
from playgate.kernel.models.game_session import GameSession
from playgate.kernel.models.ticket import PlayerTickets

__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "GamePolicy",
    "QuestionAttempt",
    "GameSession",
    "PlayerTickets",
]
