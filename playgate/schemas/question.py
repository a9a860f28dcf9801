"""
Pydantic schemas for the question gate API.
"""

from typing import Any, List, Optional

from pydantic import BaseModel

from playgate.engines.gate.types import ValidationStatus


class AnswerOptionSchema(BaseModel):
    id: int
    text: str
    html: bool = False


class QuestionResponse(BaseModel):
    """A served question. Never carries correct-answer data."""

    id: int
    quiz_id: int
    title: str = ""
    text: str
    type: str
    points: int
    answers: List[AnswerOptionSchema] = []


class ValidateAnswerRequest(BaseModel):
    """
    Submitted answer.

    answer is an answer id (single_choice), a list of ids
    (multiple_choice) or a string (free_text, fill_blank).
    """

    question_id: int
    answer: Any = None
    session_id: Optional[int] = None


class ValidateAnswerResponse(BaseModel):
    valid: bool
    correct: bool
    points: int
    message: str
    status: ValidationStatus
