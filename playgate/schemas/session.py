"""
Pydantic schemas for game sessions and lesson activity.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionStartRequest(BaseModel):
    course_id: Optional[int] = None
    game_type: str = Field(min_length=1, max_length=50)


class SessionEndRequest(BaseModel):
    score: int = Field(default=0, ge=0)
    duration: int = Field(default=0, ge=0, description="Seconds played")


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    course_id: Optional[int] = None
    game_type: str
    score: int
    duration: int
    completed: bool
    created_at: datetime


class LessonViewResponse(BaseModel):
    """Acknowledges a reported lesson view."""

    lesson_id: int
    course_id: int
    last_viewed_at: datetime
    progress_pct: Optional[float] = None
