"""
Policy Store - reads game_policies for the evaluator.
"""

from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from playgate.engines.policy.types import PolicyRecord, RuleType
from playgate.kernel.models.policy import GamePolicy
from playgate.logging_config import get_logger

logger = get_logger(__name__)


DEFAULT_POLICIES: List[Dict[str, Any]] = [
    {
        "name": "Free Play Window",
        "rule_type": RuleType.FREE_PLAY.value,
        "conditions": {
            "start_time": "15:00",
            "end_time": "17:00",
            "days": ["mon", "tue", "wed", "thu", "fri"],
        },
        "actions": {
            "allow_free_play": True,
            "no_tickets_required": True,
        },
        "priority": 10,
        "active": False,
    },
    {
        "name": "Quiet Hours",
        "rule_type": RuleType.QUIET_HOURS.value,
        "conditions": {
            "start_time": "22:00",
            "end_time": "07:00",
        },
        "actions": {
            "block_access": True,
            "message": "Games are not available during quiet hours.",
        },
        "priority": 5,
        "active": False,
    },
    {
        "name": "Study First",
        "rule_type": RuleType.STUDY_FIRST.value,
        "conditions": {
            "require_lesson_view": True,
            "minimum_time": 600,  # 10 minutes
        },
        "actions": {
            "redirect_to_lesson": True,
            "message": "Please complete the lesson before playing games.",
        },
        "priority": 20,
        "active": True,
    },
]


class SqlPolicyStore:
    """
    Policy storage on game_policies.

    Policies are authored elsewhere; the evaluator only reads them.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_active_policies(self) -> List[PolicyRecord]:
        """Active policies ordered by (priority ASC, id ASC)."""
        result = await self.db.execute(
            select(GamePolicy)
            .where(GamePolicy.active.is_(True))
            .order_by(GamePolicy.priority.asc(), GamePolicy.id.asc())
        )
        return [PolicyRecord.model_validate(p) for p in result.scalars().all()]

    async def list_policy_summaries(self) -> List[Dict[str, Any]]:
        """Public view of active policies: conditions and actions are withheld."""
        return [
            {"name": p.name, "rule_type": p.rule_type, "active": True}
            for p in await self.get_active_policies()
        ]

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(GamePolicy.id)))
        return result.scalar() or 0

    async def add(self, record: Dict[str, Any]) -> GamePolicy:
        policy = GamePolicy(
            name=record["name"],
            rule_type=str(record["rule_type"]),
            conditions=dict(record.get("conditions") or {}),
            actions=dict(record.get("actions") or {}),
            priority=int(record.get("priority", 10)),
            active=bool(record.get("active", True)),
        )
        self.db.add(policy)
        await self.db.flush()
        return policy

    async def seed_default_policies(self) -> int:
        """Insert DEFAULT_POLICIES when the table is empty. Returns rows inserted."""
        if await self.count() > 0:
            return 0
        for record in DEFAULT_POLICIES:
            await self.add(record)
        logger.info("Seeded %d default policies", len(DEFAULT_POLICIES))
        return len(DEFAULT_POLICIES)
