"""
Rule-type handlers and the rule registry.

Every handler is a pure function of (conditions, actions, context). Built-in
handlers parse their conditions through a pydantic model, so malformed
conditions surface as a ValidationError which the evaluator treats as
non-blocking.

Custom rule types plug in through RuleRegistry.register():

    class WeekendOnly:
        def evaluate(self, conditions, actions, context):
            if context.current_day in ("sat", "sun"):
                return RuleResult.allow()
            return RuleResult.deny("Games are weekend-only.", actions)

    registry.register("weekend_only", WeekendOnly())
"""

import math
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Type, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from playgate.engines.policy.time_windows import is_in_window, is_time_between, parse_clock
from playgate.engines.policy.types import PolicyContext, RuleResult, RuleType


class RuleEvaluator(Protocol):
    """Strategy interface for one rule type."""

    def evaluate(
        self,
        conditions: Mapping[str, Any],
        actions: Mapping[str, Any],
        context: PolicyContext,
    ) -> RuleResult:
        ...


# Condition models (keys as persisted in game_policies.conditions)

class _Conditions(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class _WindowConditions(_Conditions):
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def _valid_clock(cls, v: str) -> str:
        parse_clock(v)
        return v


class QuietHoursConditions(_WindowConditions):
    pass


class FreePlayConditions(_WindowConditions):
    days: List[str] = Field(default_factory=list)

    @field_validator("days")
    @classmethod
    def _lower_days(cls, v: List[str]) -> List[str]:
        return [d.strip().lower()[:3] for d in v]


class StudyFirstConditions(_Conditions):
    require_lesson_view: bool = True
    minimum_time: int = Field(
        default=0,
        validation_alias=AliasChoices("minimum_time", "minimum_time_seconds"),
    )


class DailyLimitConditions(_Conditions):
    max_games_per_day: int = 0  # 0 = not configured
    max_time_per_day: int = 0  # seconds, 0 = not configured


class CourseSpecificConditions(_Conditions):
    blocked_courses: List[int] = Field(default_factory=list)
    minimum_progress: float = 0


class _NoConditions(_Conditions):
    pass


# Built-in rules

class BaseRule(ABC):
    """Parses conditions with conditions_model, then delegates to check()."""

    rule_type: str = ""
    conditions_model: Type[_Conditions] = _NoConditions

    def evaluate(
        self,
        conditions: Mapping[str, Any],
        actions: Mapping[str, Any],
        context: PolicyContext,
    ) -> RuleResult:
        parsed = self.conditions_model.model_validate(dict(conditions or {}))
        return self.check(parsed, dict(actions or {}), context)

    @abstractmethod
    def check(self, conditions: Any, actions: Dict[str, Any], context: PolicyContext) -> RuleResult:
        ...


class QuietHoursRule(BaseRule):
    """Deny-window. Wraps midnight when start > end."""

    rule_type = RuleType.QUIET_HOURS.value
    conditions_model = QuietHoursConditions
    DEFAULT_MESSAGE = "Games are not available during quiet hours."

    def check(self, conditions: QuietHoursConditions, actions, context) -> RuleResult:
        if is_in_window(context.current_time, conditions.start_time, conditions.end_time):
            return RuleResult.deny(actions.get("message") or self.DEFAULT_MESSAGE, actions)
        return RuleResult.allow()


class FreePlayRule(BaseRule):
    """
    Advisory allow-window: never blocks. While the window is open the
    policy's actions are attached to the decision.
    """

    rule_type = RuleType.FREE_PLAY.value
    conditions_model = FreePlayConditions

    def check(self, conditions: FreePlayConditions, actions, context) -> RuleResult:
        if conditions.days and context.current_day not in conditions.days:
            return RuleResult.allow()
        if is_time_between(context.current_time, conditions.start_time, conditions.end_time):
            return RuleResult.allow(actions)
        return RuleResult.allow()


class StudyFirstRule(BaseRule):
    """Requires a recent lesson view in the requested course."""

    rule_type = RuleType.STUDY_FIRST.value
    conditions_model = StudyFirstConditions
    DEFAULT_MESSAGE = "Please complete a lesson before playing games."

    def check(self, conditions: StudyFirstConditions, actions, context) -> RuleResult:
        if context.course_id is None or not conditions.require_lesson_view:
            return RuleResult.allow()

        last_view = context.last_lesson_viewed_at
        if last_view is None:
            return RuleResult.deny(actions.get("message") or self.DEFAULT_MESSAGE, actions)

        if conditions.minimum_time > 0:
            # a view stamped after now (clock skew) counts as just viewed
            elapsed = max(0.0, (_as_aware(context.now) - _as_aware(last_view)).total_seconds())
            if elapsed < conditions.minimum_time:
                remaining_minutes = math.ceil((conditions.minimum_time - elapsed) / 60)
                return RuleResult.deny(
                    f"Please study for {remaining_minutes} more minutes before playing games.",
                    actions,
                )
        return RuleResult.allow()


class ParentControlRule(BaseRule):
    """
    Applies guardian controls from the context. time_restrictions is an
    allow-window (block when outside), checked without midnight wrap.
    """

    rule_type = RuleType.PARENT_CONTROL.value

    def check(self, conditions, actions, context) -> RuleResult:
        controls = context.parent_controls

        if controls.games_blocked:
            return RuleResult.deny("Games have been disabled by your parent/guardian.", actions)

        window = controls.time_restrictions
        if window is not None and window.start and window.end:
            if not is_time_between(context.current_time, window.start, window.end):
                return RuleResult.deny(
                    f"Games are only available between {window.start} and {window.end}.",
                    actions,
                )

        if controls.require_tickets and (context.ticket_balance or 0) <= 0:
            return RuleResult.deny(
                "You need tickets to play. Ask your parent/guardian for more.",
                actions,
            )
        return RuleResult.allow()


class DailyLimitRule(BaseRule):
    rule_type = RuleType.DAILY_LIMIT.value
    conditions_model = DailyLimitConditions

    def check(self, conditions: DailyLimitConditions, actions, context) -> RuleResult:
        stats = context.today_stats
        if conditions.max_games_per_day and stats.games_played >= conditions.max_games_per_day:
            return RuleResult.deny("You have reached your daily game limit.", actions)
        if conditions.max_time_per_day and stats.time_played_seconds >= conditions.max_time_per_day:
            return RuleResult.deny("You have reached your daily play time limit.", actions)
        return RuleResult.allow()


class CourseSpecificRule(BaseRule):
    """Course block-list and minimum progress. Unknown progress skips the progress check."""

    rule_type = RuleType.COURSE_SPECIFIC.value
    conditions_model = CourseSpecificConditions

    def check(self, conditions: CourseSpecificConditions, actions, context) -> RuleResult:
        if context.course_id is None:
            return RuleResult.allow()

        if context.course_id in conditions.blocked_courses:
            return RuleResult.deny("Games are not available for this course.", actions)

        progress = context.course_progress_pct
        if conditions.minimum_progress and progress is not None:
            if progress < conditions.minimum_progress:
                return RuleResult.deny(
                    f"Complete at least {conditions.minimum_progress:g}% of the course to unlock games.",
                    actions,
                )
        return RuleResult.allow()


def _as_aware(value: datetime) -> datetime:
    """Naive datetimes from providers are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# Registry

RuleFunction = Callable[[Mapping[str, Any], Mapping[str, Any], PolicyContext], RuleResult]


class _FunctionRule:
    """Adapts a plain function to the RuleEvaluator interface."""

    def __init__(self, func: RuleFunction):
        self._func = func

    def evaluate(self, conditions, actions, context) -> RuleResult:
        return self._func(conditions, actions, context)


BUILTIN_RULES: Dict[str, Type[BaseRule]] = {
    RuleType.FREE_PLAY.value: FreePlayRule,
    RuleType.QUIET_HOURS.value: QuietHoursRule,
    RuleType.STUDY_FIRST.value: StudyFirstRule,
    RuleType.PARENT_CONTROL.value: ParentControlRule,
    RuleType.DAILY_LIMIT.value: DailyLimitRule,
    RuleType.COURSE_SPECIFIC.value: CourseSpecificRule,
}


class RuleRegistry:
    """
    Map of rule_type -> RuleEvaluator.

    Rule types without a registered evaluator (including "custom" until an
    extension registers one) are non-blocking.
    """

    def __init__(self, evaluators: Optional[Mapping[str, RuleEvaluator]] = None):
        self._evaluators: Dict[str, RuleEvaluator] = dict(evaluators or {})

    @classmethod
    def with_builtin_rules(cls) -> "RuleRegistry":
        return cls({rule_type: rule_cls() for rule_type, rule_cls in BUILTIN_RULES.items()})

    def register(self, rule_type: str, evaluator: Union[RuleEvaluator, RuleFunction]) -> None:
        """Register or replace the evaluator for a rule type."""
        if not hasattr(evaluator, "evaluate"):
            if not callable(evaluator):
                raise TypeError("evaluator must define evaluate() or be callable")
            evaluator = _FunctionRule(evaluator)
        self._evaluators[str(rule_type)] = evaluator  # type: ignore[assignment]

    def unregister(self, rule_type: str) -> None:
        self._evaluators.pop(str(rule_type), None)

    def get(self, rule_type: str) -> Optional[RuleEvaluator]:
        return self._evaluators.get(str(rule_type))

    def __contains__(self, rule_type: object) -> bool:
        return str(rule_type) in self._evaluators

    @property
    def rule_types(self) -> List[str]:
        return sorted(self._evaluators)
