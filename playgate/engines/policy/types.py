"""
Policy engine data types: policy records, evaluation context, decisions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class RuleType(str, Enum):
    """Built-in policy rule types."""
    FREE_PLAY = "free_play"
    QUIET_HOURS = "quiet_hours"
    STUDY_FIRST = "study_first"
    PARENT_CONTROL = "parent_control"
    DAILY_LIMIT = "daily_limit"
    COURSE_SPECIFIC = "course_specific"
    CUSTOM = "custom"


class PolicyRecord(BaseModel):
    """
    A policy as read by the evaluator.

    rule_type is a plain string: unknown types must survive loading so the
    registry can treat them as non-blocking.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    rule_type: str
    conditions: Dict[str, Any] = Field(default_factory=dict)
    actions: Dict[str, Any] = Field(default_factory=dict)
    priority: int = 10
    active: bool = True


class TimeWindow(BaseModel):
    """A clock window, both ends "HH:MM"."""
    start: str
    end: str


class TodayStats(BaseModel):
    """Play counters for the current day."""
    games_played: int = 0
    time_played_seconds: int = 0


class ParentControls(BaseModel):
    """Guardian controls. The defaults are the neutral, non-blocking structure."""
    games_blocked: bool = False
    time_restrictions: Optional[TimeWindow] = None
    require_tickets: bool = False


class PolicyContext(BaseModel):
    """Point-in-time facts a policy is evaluated against. Built per evaluation."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    course_id: Optional[int] = None
    now: datetime
    current_time: str  # "HH:MM" in site timezone
    current_day: str  # "mon".."sun"
    course_progress_pct: Optional[float] = None  # None = unknown
    today_stats: TodayStats = Field(default_factory=TodayStats)
    parent_controls: ParentControls = Field(default_factory=ParentControls)
    last_lesson_viewed_at: Optional[datetime] = None
    ticket_balance: Optional[int] = None


@dataclass
class RuleResult:
    """Outcome of a single rule handler."""
    block: bool = False
    message: str = ""
    actions: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def allow(cls, actions: Optional[Dict[str, Any]] = None) -> "RuleResult":
        return cls(block=False, message="", actions=dict(actions or {}))

    @classmethod
    def deny(cls, message: str, actions: Optional[Dict[str, Any]] = None) -> "RuleResult":
        return cls(block=True, message=message, actions=dict(actions or {}))


class PlayDecision(BaseModel):
    """Final answer to "can this learner play right now?"."""

    can_play: bool
    reason: Optional[str] = None
    policy: Optional[str] = None
    rule_type: Optional[str] = None
    policy_id: Optional[int] = None
    actions: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def allowed(cls, actions: Optional[Dict[str, Any]] = None) -> "PlayDecision":
        return cls(can_play=True, actions=dict(actions or {}))

    @classmethod
    def blocked(cls, policy: PolicyRecord, result: RuleResult) -> "PlayDecision":
        return cls(
            can_play=False,
            reason=result.message,
            policy=policy.name,
            rule_type=policy.rule_type,
            policy_id=policy.id,
            actions=result.actions,
        )
