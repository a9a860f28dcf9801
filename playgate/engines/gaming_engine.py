"""
Gaming Engine - the service object callers use to gate play and run quizzes.

Built explicitly with its collaborators and passed to whoever needs it;
there is no process-wide instance. The question cache is the only state
that must outlive a single request, so callers share one cache across
engines built per request.
"""

import random
from typing import TYPE_CHECKING, Any, Iterable, Optional

from playgate.engines.gate.cache import QuestionCache
from playgate.engines.gate.checkers import AnswerCheckerRegistry
from playgate.engines.gate.selector import QuestionSelector
from playgate.engines.gate.types import Question, ValidationResult
from playgate.engines.gate.validator import AnswerValidator
from playgate.engines.policy.context_builder import ContextBuilder
from playgate.engines.policy.evaluator import PolicyEvaluator
from playgate.engines.policy.rules import RuleRegistry
from playgate.engines.policy.types import PlayDecision
from playgate.logging_config import get_logger

if TYPE_CHECKING:
    from playgate.providers.base import AttemptSink, PolicyStore, QuizQuestionProvider

logger = get_logger(__name__)


class GamingEngine:
    """
    Policy engine plus question gate.

    Usage:
        engine = GamingEngine(store, ContextBuilder(...), quiz_bank, cache)
        decision = await engine.can_user_play(user_id, course_id)
        if decision.can_play:
            question = await engine.get_question(quiz_id, user_id)
    """

    def __init__(
        self,
        policy_store: "PolicyStore",
        context_builder: ContextBuilder,
        quiz_provider: "QuizQuestionProvider",
        question_cache: QuestionCache,
        attempt_sink: Optional["AttemptSink"] = None,
        rule_registry: Optional[RuleRegistry] = None,
        answer_checkers: Optional[AnswerCheckerRegistry] = None,
        rng: Optional[random.Random] = None,
    ):
        self.policy_store = policy_store
        self.context_builder = context_builder
        self.evaluator = PolicyEvaluator(rule_registry)
        self.selector = QuestionSelector(quiz_provider, question_cache, rng)
        self.validator = AnswerValidator(question_cache, attempt_sink, answer_checkers)

    @property
    def rule_registry(self) -> RuleRegistry:
        return self.evaluator.registry

    async def can_user_play(self, user_id: int, course_id: Optional[int] = None) -> PlayDecision:
        """Evaluate every active policy against a fresh context."""
        policies = await self.policy_store.get_active_policies()
        context = await self.context_builder.build(user_id, course_id)
        return self.evaluator.evaluate(policies, context)

    async def get_question(
        self,
        quiz_id: int,
        user_id: int,
        exclude: Optional[Iterable[int]] = None,
        difficulty: Optional[str] = None,
        question_id: Optional[int] = None,
    ) -> Optional[Question]:
        return await self.selector.select(
            quiz_id,
            user_id,
            exclude=exclude,
            difficulty=difficulty,
            question_id=question_id,
        )

    async def validate_answer(
        self,
        question_id: int,
        user_id: int,
        answer: Any,
        session_id: Optional[int] = None,
    ) -> ValidationResult:
        return await self.validator.validate(question_id, user_id, answer, session_id=session_id)
