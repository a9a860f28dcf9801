"""
Question gate data types.

Question is the only shape that leaves the server. Correct-answer data
lives on QuizQuestion (from the provider) and CachedQuestionRecord (in
the cache) and is dropped by to_public().
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field


class QuestionType(str, Enum):
    """Question types served to game clients."""
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    FREE_TEXT = "free_text"
    FILL_BLANK = "fill_blank"
    SORT = "sort"
    MATRIX = "matrix"
    ASSESSMENT = "assessment"
    ESSAY = "essay"


class AnswerOption(BaseModel):
    """One servable answer choice. id is stable across shuffles."""
    id: int
    text: str
    html: bool = False


class Question(BaseModel):
    """Sanitized question: safe to send to a client."""

    id: int
    quiz_id: int
    title: str = ""
    text: str
    type: QuestionType
    points: int = 1
    answers: List[AnswerOption] = Field(default_factory=list)


CorrectAnswer = List[Union[int, str]]


class QuizQuestion(Question):
    """Provider record: the question plus correctness and difficulty metadata."""

    correct_answer: CorrectAnswer = Field(default_factory=list)
    difficulty: Optional[str] = None

    def to_public(self) -> Question:
        return Question.model_validate(self.model_dump(include=set(Question.model_fields)))


class CachedQuestionRecord(QuizQuestion):
    """What selection writes and validation consumes, keyed by (question_id, user_id)."""

    user_id: int


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Attempt(BaseModel):
    """Append-only audit record of one validation."""

    session_id: int
    question_id: int
    quiz_id: int
    user_id: Optional[int] = None
    user_answer: Any = None
    is_correct: bool
    points_earned: int = 0
    timestamp: datetime = Field(default_factory=_utcnow)


class ValidationStatus(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    EXPIRED = "expired"
    INVALID_ANSWER = "invalid_answer"


class ValidationResult(BaseModel):
    """Outcome of validating one submitted answer."""

    valid: bool
    correct: bool = False
    points: int = 0
    message: str
    status: ValidationStatus

    @classmethod
    def expired(cls) -> "ValidationResult":
        return cls(
            valid=False,
            message="Question expired or not found",
            status=ValidationStatus.EXPIRED,
        )

    @classmethod
    def invalid_answer(cls) -> "ValidationResult":
        return cls(
            valid=False,
            message="Invalid answer format for this question type",
            status=ValidationStatus.INVALID_ANSWER,
        )

    @classmethod
    def graded(cls, correct: bool, points: int) -> "ValidationResult":
        return cls(
            valid=True,
            correct=correct,
            points=points if correct else 0,
            message="Correct!" if correct else "Incorrect",
            status=ValidationStatus.CORRECT if correct else ValidationStatus.INCORRECT,
        )
