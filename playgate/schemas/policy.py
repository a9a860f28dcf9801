"""
Pydantic schemas for the policy API.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class PlayCheckResponse(BaseModel):
    """Answer to "can I play?". reason/policy are set only when blocked."""

    can_play: bool
    reason: Optional[str] = None
    policy: Optional[str] = None
    rule_type: Optional[str] = None
    actions: Dict[str, Any] = {}


class PolicySummary(BaseModel):
    """Public view of an active policy."""

    name: str
    rule_type: str
    active: bool = True
