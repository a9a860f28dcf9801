"""
Lesson activity endpoint - the LMS reports lesson views here.
"""

from typing import Optional

from fastapi import APIRouter, Query

from playgate.api.deps import CurrentUserId, Runtime
from playgate.schemas.session import LessonViewResponse

router = APIRouter()


@router.post("/{lesson_id}/viewed", response_model=LessonViewResponse)
async def record_lesson_view(
    lesson_id: int,
    user_id: CurrentUserId,
    runtime: Runtime,
    course_id: int = Query(..., ge=1),
    progress_pct: Optional[float] = Query(default=None, ge=0, le=100),
):
    last_viewed = runtime.lesson_activity.record_view(user_id, course_id, progress_pct=progress_pct)
    return LessonViewResponse(
        lesson_id=lesson_id,
        course_id=course_id,
        last_viewed_at=last_viewed,
        progress_pct=await runtime.lesson_activity.get_progress(user_id, course_id),
    )
