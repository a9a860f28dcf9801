"""
Context Builder - assembles the point-in-time facts policies decide on.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, TypeVar
from zoneinfo import ZoneInfo

from playgate.engines.policy.time_windows import DAY_NAMES
from playgate.engines.policy.types import ParentControls, PolicyContext, TodayStats
from playgate.logging_config import get_logger
from playgate.providers.errors import ProviderUnavailable

if TYPE_CHECKING:
    from playgate.providers.base import (
        CourseProgressProvider,
        DailyStatsProvider,
        LessonActivityProvider,
        ParentControlProvider,
        TicketStore,
    )

logger = get_logger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContextBuilder:
    """
    Builds a PolicyContext per evaluation. Read-only against every provider.

    Optional providers may be missing or failing. Either way the neutral
    default for that fact is used. The daily stats provider is only excused
    for ProviderUnavailable.
    """

    def __init__(
        self,
        stats_provider: Optional["DailyStatsProvider"] = None,
        course_progress_provider: Optional["CourseProgressProvider"] = None,
        parent_control_provider: Optional["ParentControlProvider"] = None,
        lesson_activity_provider: Optional["LessonActivityProvider"] = None,
        ticket_store: Optional["TicketStore"] = None,
        timezone_name: str = "UTC",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.stats_provider = stats_provider
        self.course_progress_provider = course_progress_provider
        self.parent_control_provider = parent_control_provider
        self.lesson_activity_provider = lesson_activity_provider
        self.ticket_store = ticket_store
        self.tz = ZoneInfo(timezone_name)
        self.clock = clock

    def local_now(self) -> datetime:
        now = self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(self.tz)

    async def _optional(self, label: str, user_id: int, fetch: Callable[[], Awaitable[T]], default: T) -> T:
        """Await an optional provider; any failure gives the neutral default."""
        try:
            return await fetch()
        except ProviderUnavailable as exc:
            logger.warning("%s unavailable for user %s: %s", label, user_id, exc)
        except Exception:
            logger.exception("%s provider failed for user %s, using default", label, user_id)
        return default

    async def build(self, user_id: int, course_id: Optional[int] = None) -> PolicyContext:
        now = self.local_now()

        today_stats = TodayStats()
        if self.stats_provider is not None:
            try:
                today_stats = await self.stats_provider.get_today_stats(user_id, now.date())
            except ProviderUnavailable as exc:
                logger.warning("Daily stats unavailable for user %s: %s", user_id, exc)

        progress: Optional[float] = None
        if course_id is not None and self.course_progress_provider is not None:
            progress = await self._optional(
                "Course progress",
                user_id,
                lambda: self.course_progress_provider.get_progress(user_id, course_id),
                None,
            )

        controls = ParentControls()
        if self.parent_control_provider is not None:
            controls = await self._optional(
                "Parent controls",
                user_id,
                lambda: self.parent_control_provider.get_controls(user_id),
                None,
            ) or ParentControls()

        last_view: Optional[datetime] = None
        if course_id is not None and self.lesson_activity_provider is not None:
            last_view = await self._optional(
                "Lesson activity",
                user_id,
                lambda: self.lesson_activity_provider.get_last_lesson_view(user_id, course_id),
                None,
            )

        tickets: Optional[int] = None
        if controls.require_tickets and self.ticket_store is not None:
            tickets = await self._optional(
                "Ticket balance",
                user_id,
                lambda: self.ticket_store.get_balance(user_id),
                None,
            )

        return PolicyContext(
            user_id=user_id,
            course_id=course_id,
            now=now,
            current_time=now.strftime("%H:%M"),
            current_day=DAY_NAMES[now.weekday()],
            course_progress_pct=progress,
            today_stats=today_stats,
            parent_controls=controls,
            last_lesson_viewed_at=last_view,
            ticket_balance=tickets,
        )
