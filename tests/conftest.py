"""
Pytest fixtures for Play Gate tests.
"""

import os
import tempfile
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict, List, Optional

# File-based SQLite so the app and fixtures share one database (in-memory is per-connection).
# Must be set before playgate.config settings are first read.
_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
TEST_DB_PATH = _tmp.name
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["SEED_DEFAULT_POLICIES"] = "false"
os.environ["QUESTION_CACHE_TTL_SECONDS"] = "300"

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from playgate.config import get_settings

get_settings.cache_clear()

from playgate.engines.gate.types import Attempt
from playgate.engines.policy.time_windows import DAY_NAMES
from playgate.engines.policy.types import (
    ParentControls,
    PolicyContext,
    PolicyRecord,
    TodayStats,
)
from playgate.kernel.identity.jwt import JWTManager
from playgate.kernel.models.base import Base
from playgate.providers.quiz_bank import QuizBank


# Wednesday
BASE_DAY = (2026, 10, 14)


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingAttemptSink:
    """AttemptSink keeping attempts in a list."""

    def __init__(self):
        self.attempts: List[Attempt] = []

    async def record(self, attempt: Attempt) -> None:
        self.attempts.append(attempt)


class StaticPolicyStore:
    def __init__(self, policies: List[PolicyRecord]):
        self.policies = policies

    async def get_active_policies(self) -> List[PolicyRecord]:
        return [p for p in self.policies if p.active]


def make_context(
    current_time: str = "12:00",
    user_id: int = 42,
    course_id: Optional[int] = 7,
    games_played: int = 0,
    time_played_seconds: int = 0,
    parent_controls: Optional[ParentControls] = None,
    **kwargs: Any,
) -> PolicyContext:
    hour, minute = (int(p) for p in current_time.split(":"))
    now = kwargs.pop("now", None) or datetime(*BASE_DAY, hour, minute, tzinfo=timezone.utc)
    return PolicyContext(
        user_id=user_id,
        course_id=course_id,
        now=now,
        current_time=current_time,
        current_day=kwargs.pop("current_day", DAY_NAMES[now.weekday()]),
        today_stats=TodayStats(games_played=games_played, time_played_seconds=time_played_seconds),
        parent_controls=parent_controls or ParentControls(),
        **kwargs,
    )


def make_policy(
    policy_id: int,
    rule_type: str,
    conditions: Optional[Dict[str, Any]] = None,
    actions: Optional[Dict[str, Any]] = None,
    priority: int = 10,
    active: bool = True,
    name: Optional[str] = None,
) -> PolicyRecord:
    return PolicyRecord(
        id=policy_id,
        name=name or f"{rule_type} #{policy_id}",
        rule_type=rule_type,
        conditions=conditions or {},
        actions=actions or {},
        priority=priority,
        active=active,
    )


QUIZ_DATA: Dict[str, Any] = {
    "quizzes": [
        {
            "id": 5,
            "randomize_answers": False,
            "questions": [
                {
                    "id": 501,
                    "title": "Capitals",
                    "text": "What is the capital of France?",
                    "type": "single_choice",
                    "points": 2,
                    "difficulty": "easy",
                    "answers": [
                        {"text": "Rome"},
                        {"text": "Paris", "correct": True},
                        {"text": "Madrid"},
                    ],
                },
                {
                    "id": 502,
                    "title": "Odd numbers",
                    "text": "Select the odd numbers.",
                    "type": "multiple_choice",
                    "points": 3,
                    "difficulty": "hard",
                    "answers": [
                        {"text": "0"},
                        {"text": "1", "correct": True},
                        {"text": "2"},
                        {"text": "3", "correct": True},
                    ],
                },
                {
                    "id": 503,
                    "text": "Water freezes at ____ degrees Celsius.",
                    "type": "fill_blank",
                    "points": 1,
                    "difficulty": "easy",
                    "accepted_answers": ["zero", "0"],
                },
                {
                    "id": 504,
                    "text": "Put the planets in order from the sun.",
                    "type": "sort",
                    "points": 4,
                    "answers": [{"text": "Venus"}, {"text": "Mercury"}, {"text": "Earth"}],
                },
            ],
        },
        {
            "id": 6,
            "randomize_answers": True,
            "questions": [
                {
                    "id": 601,
                    "text": "Pick the mammal.",
                    "type": "single_choice",
                    "answers": [
                        {"text": "Shark"},
                        {"text": "Dolphin", "correct": True},
                        {"text": "Trout"},
                        {"text": "Eel"},
                    ],
                },
            ],
        },
        {"id": 9, "questions": []},
    ],
}


@pytest.fixture
def quiz_bank() -> QuizBank:
    return QuizBank(QUIZ_DATA)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def attempt_sink() -> RecordingAttemptSink:
    return RecordingAttemptSink()


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    """Fresh SQLite database per test."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'integration.db'}",
        echo=False,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def jwt_manager() -> JWTManager:
    """JWT manager signing with the test secret."""
    return JWTManager(
        secret_key=os.environ["SECRET_KEY"],
        algorithm="HS256",
        access_token_expire_minutes=30,
    )


def bearer(jwt_manager: JWTManager, user_id: int) -> Dict[str, str]:
    token, _, _ = jwt_manager.create_access_token(user_id=user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(jwt_manager: JWTManager) -> Dict[str, str]:
    """Authentication headers for learner 42."""
    return bearer(jwt_manager, 42)


@pytest.fixture
def context_factory():
    """Build a PolicyContext on a Wednesday at the given clock time."""
    return make_context


@pytest.fixture
def policy_factory():
    return make_policy


@pytest.fixture
def policy_store_factory():
    return StaticPolicyStore


@pytest.fixture
def headers_for(jwt_manager: JWTManager):
    """Authentication headers for any learner id."""
    return lambda user_id: bearer(jwt_manager, user_id)
