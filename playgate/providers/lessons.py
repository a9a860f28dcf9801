"""
Learner activity - in-process record of lesson views and course progress.

The LMS reports lesson views (and, when it knows it, course progress)
through the API; study_first and course_specific read them back. Lost on
restart, like the question cache.
"""

from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

_Key = Tuple[int, int]


class InMemoryLessonActivity:
    """LessonActivityProvider and CourseProgressProvider keyed by (user, course)."""

    def __init__(self):
        self._views: Dict[_Key, datetime] = {}
        self._progress: Dict[_Key, float] = {}

    def record_view(
        self,
        user_id: int,
        course_id: int,
        viewed_at: Optional[datetime] = None,
        progress_pct: Optional[float] = None,
    ) -> datetime:
        """Keep the latest view; progress is clamped to 0-100."""
        viewed_at = viewed_at or datetime.now(timezone.utc)
        if viewed_at.tzinfo is None:
            viewed_at = viewed_at.replace(tzinfo=timezone.utc)
        key = (user_id, course_id)
        current = self._views.get(key)
        if current is None or viewed_at > current:
            self._views[key] = viewed_at
        if progress_pct is not None:
            self._progress[key] = min(100.0, max(0.0, float(progress_pct)))
        return self._views[key]

    async def get_last_lesson_view(self, user_id: int, course_id: int) -> Optional[datetime]:
        return self._views.get((user_id, course_id))

    async def get_progress(self, user_id: int, course_id: int) -> Optional[float]:
        return self._progress.get((user_id, course_id))
