"""
Kernel Layer

Persistence models and identity verification shared by the policy
engine, the question gate and the API layer.
"""

from playgate.kernel.models import (
    Base,
    GamePolicy,
    QuestionAttempt,
    GameSession,
    PlayerTickets,
)

__all__ = [
    "Base",
    "GamePolicy",
    "QuestionAttempt",
    "GameSession",
    "PlayerTickets",
]
