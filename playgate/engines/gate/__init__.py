"""
Question Gate - serves sanitized quiz questions and validates answers.

Selection caches the correct answer per (question_id, user_id) for a short
TTL; validation consumes that entry.
"""

from playgate.engines.gate.cache import (
    DEFAULT_TTL_SECONDS,
    InMemoryQuestionCache,
    QuestionCache,
    QuestionCacheKey,
)
from playgate.engines.gate.checkers import (
    AnswerCheckerRegistry,
    InvalidAnswerError,
    check_multiple_choice,
    check_single_choice,
    check_text,
)
from playgate.engines.gate.selector import QuestionSelector
from playgate.engines.gate.types import (
    AnswerOption,
    Attempt,
    CachedQuestionRecord,
    Question,
    QuestionType,
    QuizQuestion,
    ValidationResult,
    ValidationStatus,
)
from playgate.engines.gate.validator import AnswerValidator

__all__ = [
    "DEFAULT_TTL_SECONDS",
    "InMemoryQuestionCache",
    "QuestionCache",
    "QuestionCacheKey",
    "AnswerCheckerRegistry",
    "InvalidAnswerError",
    "check_multiple_choice",
    "check_single_choice",
    "check_text",
    "QuestionSelector",
    "AnswerOption",
    "Attempt",
    "CachedQuestionRecord",
    "Question",
    "QuestionType",
    "QuizQuestion",
    "ValidationResult",
    "ValidationStatus",
    "AnswerValidator",
]
