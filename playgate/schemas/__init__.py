"""
Pydantic schemas for API request/response validation.
"""

from playgate.schemas.common import ErrorDetail, ErrorResponse, HealthResponse, error_detail
from playgate.schemas.policy import PlayCheckResponse, PolicySummary
from playgate.schemas.question import (
    AnswerOptionSchema,
    QuestionResponse,
    ValidateAnswerRequest,
    ValidateAnswerResponse,
)
from playgate.schemas.session import (
    LessonViewResponse,
    SessionEndRequest,
    SessionResponse,
    SessionStartRequest,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "error_detail",
    "HealthResponse",
    "PlayCheckResponse",
    "PolicySummary",
    "AnswerOptionSchema",
    "QuestionResponse",
    "ValidateAnswerRequest",
    "ValidateAnswerResponse",
    "LessonViewResponse",
    "SessionEndRequest",
    "SessionResponse",
    "SessionStartRequest",
]
