"""
Policy Engine - decides whether a learner may play right now.

Active policies are evaluated in (priority ASC, id ASC) order against a
freshly built context; the first blocking policy is the decision.

Rule types:
- free_play: advisory allow-window, never blocks
- quiet_hours: deny-window, wraps midnight
- study_first: requires a recent lesson view
- parent_control: guardian block, allow-window and tickets
- daily_limit: games and seconds played today
- course_specific: course block-list and minimum progress
- custom: whatever an extension registers
"""

from playgate.engines.policy.types import (
    ParentControls,
    PlayDecision,
    PolicyContext,
    PolicyRecord,
    RuleResult,
    RuleType,
    TimeWindow,
    TodayStats,
)
from playgate.engines.policy.rules import RuleEvaluator, RuleRegistry
from playgate.engines.policy.evaluator import PolicyEvaluator
from playgate.engines.policy.context_builder import ContextBuilder
from playgate.engines.policy.store import SqlPolicyStore, DEFAULT_POLICIES

__all__ = [
    "ParentControls",
    "PlayDecision",
    "PolicyContext",
    "PolicyRecord",
    "RuleResult",
    "RuleType",
    "TimeWindow",
    "TodayStats",
    "RuleEvaluator",
    "RuleRegistry",
    "PolicyEvaluator",
    "ContextBuilder",
    "SqlPolicyStore",
    "DEFAULT_POLICIES",
]
