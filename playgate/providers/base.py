"""
Outbound collaborator contracts.

The policy engine and question gate only consume these interfaces; the
LMS, guardian integration and persistence layers provide them.
"""

from datetime import date, datetime
from typing import List, Optional, Protocol, runtime_checkable

from playgate.engines.gate.types import Attempt, QuizQuestion
from playgate.engines.policy.types import ParentControls, PolicyRecord, TodayStats
from playgate.providers.errors import ProviderUnavailable

__all__ = [
    "ProviderUnavailable",
    "PolicyStore",
    "QuizQuestionProvider",
    "CourseProgressProvider",
    "DailyStatsProvider",
    "ParentControlProvider",
    "LessonActivityProvider",
    "TicketStore",
    "AttemptSink",
]


@runtime_checkable
class PolicyStore(Protocol):
    async def get_active_policies(self) -> List[PolicyRecord]:
        """Active policies ordered by (priority ASC, id ASC)."""
        ...


@runtime_checkable
class QuizQuestionProvider(Protocol):
    async def get_question_ids(self, quiz_id: int) -> List[int]:
        """Ordered question ids belonging to a quiz (empty if unknown)."""
        ...

    async def get_question(self, question_id: int) -> Optional[QuizQuestion]:
        """Full question record including correctness and difficulty."""
        ...

    async def answers_randomized(self, quiz_id: int) -> bool:
        """Whether answers are served in shuffled order for this quiz."""
        ...


@runtime_checkable
class CourseProgressProvider(Protocol):
    async def get_progress(self, user_id: int, course_id: int) -> Optional[float]:
        """Completion percentage 0-100, or None when unknown."""
        ...


@runtime_checkable
class DailyStatsProvider(Protocol):
    async def get_today_stats(self, user_id: int, day: date) -> TodayStats:
        ...


@runtime_checkable
class ParentControlProvider(Protocol):
    async def get_controls(self, user_id: int) -> Optional[ParentControls]:
        """Guardian controls, or None when no guardian data exists for the user."""
        ...


@runtime_checkable
class LessonActivityProvider(Protocol):
    async def get_last_lesson_view(self, user_id: int, course_id: int) -> Optional[datetime]:
        ...


@runtime_checkable
class TicketStore(Protocol):
    async def get_balance(self, user_id: int) -> int:
        ...


@runtime_checkable
class AttemptSink(Protocol):
    async def record(self, attempt: Attempt) -> None:
        """Durably append an attempt record."""
        ...
