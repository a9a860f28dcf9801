"""
Answer Validator - grades a submission against the cached correct answer.

Each cache entry grades at most one submission: the entry is removed once
grading starts, whatever the outcome.
"""

from typing import TYPE_CHECKING, Any, Optional

from playgate.engines.gate.cache import QuestionCache, QuestionCacheKey
from playgate.engines.gate.checkers import AnswerCheckerRegistry, InvalidAnswerError
from playgate.engines.gate.types import Attempt, CachedQuestionRecord, ValidationResult
from playgate.logging_config import get_logger

if TYPE_CHECKING:
    from playgate.providers.base import AttemptSink

logger = get_logger(__name__)


class AnswerValidator:
    """
    Validates answers for questions previously served by QuestionSelector.

    A missing or expired entry yields an expired result and records nothing.
    A malformed answer consumes the entry and is recorded as incorrect.
    """

    def __init__(
        self,
        cache: QuestionCache,
        attempt_sink: Optional["AttemptSink"] = None,
        checkers: Optional[AnswerCheckerRegistry] = None,
    ):
        self.cache = cache
        self.attempt_sink = attempt_sink
        self.checkers = checkers or AnswerCheckerRegistry.with_builtin_checkers()

    def _grade(self, record: CachedQuestionRecord, answer: Any) -> bool:
        checker = self.checkers.get(record.type)
        if checker is None:
            logger.info("No answer checker for question type %s, graded incorrect", record.type.value)
            return False
        return bool(checker(answer, record.correct_answer))

    async def _record_attempt(
        self,
        record: CachedQuestionRecord,
        session_id: Optional[int],
        answer: Any,
        correct: bool,
        points: int,
    ) -> None:
        if session_id is None or self.attempt_sink is None:
            return
        await self.attempt_sink.record(Attempt(
            session_id=session_id,
            question_id=record.id,
            quiz_id=record.quiz_id,
            user_id=record.user_id,
            user_answer=answer,
            is_correct=correct,
            points_earned=points,
        ))

    async def validate(
        self,
        question_id: int,
        user_id: int,
        answer: Any,
        session_id: Optional[int] = None,
    ) -> ValidationResult:
        key = QuestionCacheKey(question_id, user_id)
        record = self.cache.get(key)
        if record is None:
            logger.info("Validation for expired question", extra={"question_id": question_id, "user_id": user_id})
            return ValidationResult.expired()

        try:
            try:
                correct = self._grade(record, answer)
            except InvalidAnswerError as exc:
                logger.info("Rejected answer for question %s: %s", question_id, exc)
                await self._record_attempt(record, session_id, answer, False, 0)
                return ValidationResult.invalid_answer()

            result = ValidationResult.graded(correct, record.points)
            await self._record_attempt(record, session_id, answer, correct, result.points)
            return result
        finally:
            self.cache.delete(key)
