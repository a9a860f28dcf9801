"""
Policy Evaluator - first blocking policy wins.
"""

from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from playgate.engines.policy.rules import RuleRegistry
from playgate.engines.policy.types import PlayDecision, PolicyContext, PolicyRecord, RuleResult
from playgate.logging_config import get_logger

logger = get_logger(__name__)


class PolicyEvaluator:
    """
    Walks active policies in (priority ASC, id ASC) order and returns the
    first blocking decision. Policies after a block are never evaluated.

    Evaluation never raises: a rule type with no registered evaluator, a
    policy whose conditions do not parse, and an evaluator that throws are
    all treated as non-blocking.
    """

    def __init__(self, registry: Optional[RuleRegistry] = None):
        self.registry = registry or RuleRegistry.with_builtin_rules()

    @staticmethod
    def order_policies(policies: Iterable[PolicyRecord]) -> List[PolicyRecord]:
        """Active policies only, in evaluation order."""
        return sorted(
            (p for p in policies if p.active),
            key=lambda p: (p.priority, p.id),
        )

    def evaluate_policy(self, policy: PolicyRecord, context: PolicyContext) -> RuleResult:
        evaluator = self.registry.get(policy.rule_type)
        if evaluator is None:
            logger.debug(
                "No evaluator for rule type %s, policy %s skipped",
                policy.rule_type,
                policy.id,
            )
            return RuleResult.allow()

        try:
            result = evaluator.evaluate(policy.conditions, policy.actions, context)
        except (ValidationError, ValueError) as exc:
            logger.warning(
                "Policy %s (%s) has invalid conditions, treated as non-blocking: %s",
                policy.id,
                policy.rule_type,
                exc,
            )
            return RuleResult.allow()
        except Exception:
            logger.exception(
                "Evaluator for policy %s (%s) failed, treated as non-blocking",
                policy.id,
                policy.rule_type,
            )
            return RuleResult.allow()

        if not isinstance(result, RuleResult):
            logger.warning(
                "Evaluator for rule type %s returned %r, treated as non-blocking",
                policy.rule_type,
                type(result).__name__,
            )
            return RuleResult.allow()
        return result

    def evaluate(self, policies: Iterable[PolicyRecord], context: PolicyContext) -> PlayDecision:
        """Return the first blocking decision, or an allowed decision annotated with advisory actions."""
        advisory_actions: Dict[str, object] = {}

        for policy in self.order_policies(policies):
            result = self.evaluate_policy(policy, context)
            if result.block:
                logger.info(
                    "Play blocked by policy",
                    extra={
                        "policy_id": policy.id,
                        "policy": policy.name,
                        "rule_type": policy.rule_type,
                        "user_id": context.user_id,
                        "course_id": context.course_id,
                    },
                )
                return PlayDecision.blocked(policy, result)
            advisory_actions.update(result.actions)

        return PlayDecision.allowed(advisory_actions)
