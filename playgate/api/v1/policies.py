"""
Policy endpoints - play checks and the public list of active policies.
"""

from typing import List, Optional

from fastapi import APIRouter, Query

from playgate.api.deps import CurrentUserId, DbSession, Engine
from playgate.engines.policy.store import SqlPolicyStore
from playgate.schemas.policy import PlayCheckResponse, PolicySummary

router = APIRouter()


@router.get("/check", response_model=PlayCheckResponse)
async def check_can_play(
    user_id: CurrentUserId,
    engine: Engine,
    course_id: Optional[int] = Query(default=None, ge=1),
):
    """Whether the current learner may play right now."""
    decision = await engine.can_user_play(user_id, course_id)
    return PlayCheckResponse(
        can_play=decision.can_play,
        reason=decision.reason,
        policy=decision.policy,
        rule_type=decision.rule_type,
        actions=decision.actions,
    )


@router.get("/active", response_model=List[PolicySummary])
async def list_active_policies(
    _: CurrentUserId,
    db: DbSession,
):
    """Names and types of active policies, in evaluation order."""
    return await SqlPolicyStore(db).list_policy_summaries()
