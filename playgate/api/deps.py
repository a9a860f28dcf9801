"""
FastAPI dependencies for authentication, database sessions and the gaming engine.
"""

from dataclasses import dataclass, field
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from playgate.config import Settings
from playgate.database import get_db
from playgate.engines.gaming_engine import GamingEngine
from playgate.engines.gate.cache import InMemoryQuestionCache
from playgate.engines.gate.checkers import AnswerCheckerRegistry
from playgate.engines.policy.context_builder import ContextBuilder
from playgate.engines.policy.rules import RuleRegistry
from playgate.engines.policy.store import SqlPolicyStore
from playgate.kernel.identity.jwt import verify_access_token
from playgate.providers.lessons import InMemoryLessonActivity
from playgate.providers.parent_controls import SettingsParentControlProvider
from playgate.providers.quiz_bank import QuizBank
from playgate.providers.sql import SqlAttemptSink, SqlDailyStatsProvider, SqlTicketStore


# Security scheme
security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


@dataclass
class GateRuntime:
    """
    Process-lifetime collaborators shared by every request.

    The question cache must be shared: an answer can only be validated
    against the cache the question was served from.
    """

    settings: Settings
    question_cache: InMemoryQuestionCache
    quiz_bank: QuizBank
    lesson_activity: InMemoryLessonActivity = field(default_factory=InMemoryLessonActivity)
    rule_registry: RuleRegistry = field(default_factory=RuleRegistry.with_builtin_rules)
    answer_checkers: AnswerCheckerRegistry = field(
        default_factory=AnswerCheckerRegistry.with_builtin_checkers
    )


def build_runtime(settings: Settings) -> GateRuntime:
    if settings.quiz_bank_path:
        quiz_bank = QuizBank.from_file(settings.quiz_bank_path)
    else:
        quiz_bank = QuizBank.sample()
    return GateRuntime(
        settings=settings,
        question_cache=InMemoryQuestionCache(ttl_seconds=settings.question_cache_ttl_seconds),
        quiz_bank=quiz_bank,
    )


def get_runtime(request: Request) -> GateRuntime:
    return request.app.state.runtime


Runtime = Annotated[GateRuntime, Depends(get_runtime)]


async def get_current_user_id(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> int:
    """Learner id from the bearer token, or 401."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload.user_id


CurrentUserId = Annotated[int, Depends(get_current_user_id)]


def get_gaming_engine(db: DbSession, runtime: Runtime) -> GamingEngine:
    """Engine for this request: SQL-backed collaborators on the request session."""
    settings = runtime.settings
    context_builder = ContextBuilder(
        stats_provider=SqlDailyStatsProvider(db),
        course_progress_provider=runtime.lesson_activity,
        parent_control_provider=SettingsParentControlProvider(settings),
        lesson_activity_provider=runtime.lesson_activity,
        ticket_store=SqlTicketStore(db),
        timezone_name=settings.timezone,
    )
    return GamingEngine(
        policy_store=SqlPolicyStore(db),
        context_builder=context_builder,
        quiz_provider=runtime.quiz_bank,
        question_cache=runtime.question_cache,
        attempt_sink=SqlAttemptSink(db),
        rule_registry=runtime.rule_registry,
        answer_checkers=runtime.answer_checkers,
    )


Engine = Annotated[GamingEngine, Depends(get_gaming_engine)]
