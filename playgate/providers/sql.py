"""
SQL-backed providers for daily stats, tickets, attempts and game sessions.

Each wraps an AsyncSession supplied per request; commit is owned by the
session dependency.
"""

from datetime import date, datetime, time, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from playgate.engines.gate.types import Attempt
from playgate.engines.policy.types import TodayStats
from playgate.kernel.models.attempt import QuestionAttempt
from playgate.kernel.models.game_session import GameSession
from playgate.kernel.models.ticket import PlayerTickets
from playgate.logging_config import get_logger

logger = get_logger(__name__)


def day_bounds(day: date):
    """00:00:00 to 23:59:59 of the given day, in UTC."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)
    return start, end


class SqlDailyStatsProvider:
    """Today's games played and seconds played, from game_sessions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_today_stats(self, user_id: int, day: date) -> TodayStats:
        start, end = day_bounds(day)
        result = await self.db.execute(
            select(
                func.count(GameSession.id),
                func.coalesce(func.sum(GameSession.duration), 0),
            ).where(
                GameSession.user_id == user_id,
                GameSession.created_at >= start,
                GameSession.created_at <= end,
            )
        )
        games, seconds = result.one()
        return TodayStats(games_played=games or 0, time_played_seconds=int(seconds or 0))


class SqlTicketStore:
    """
    Ticket balances on player_tickets. Users without a row have 0.

    The service only reads balances. set_balance() is the write side for host
    code that grants or spends tickets (guardian tools, rewards jobs).
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_balance(self, user_id: int) -> int:
        row = await self.db.get(PlayerTickets, user_id)
        return row.balance if row else 0

    async def set_balance(self, user_id: int, balance: int) -> int:
        row = await self.db.get(PlayerTickets, user_id)
        if row is None:
            row = PlayerTickets(user_id=user_id, balance=balance)
            self.db.add(row)
        else:
            row.balance = balance
        await self.db.flush()
        return row.balance


class SqlAttemptSink:
    """Append-only writer for question_attempts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(self, attempt: Attempt) -> None:
        self.db.add(QuestionAttempt(
            session_id=attempt.session_id,
            question_id=attempt.question_id,
            quiz_id=attempt.quiz_id,
            user_id=attempt.user_id,
            user_answer=attempt.user_answer,
            is_correct=attempt.is_correct,
            points_earned=attempt.points_earned,
            created_at=attempt.timestamp,
        ))
        await self.db.flush()
        logger.debug(
            "Attempt recorded",
            extra={"session_id": attempt.session_id, "question_id": attempt.question_id},
        )


class SqlGameSessionStore:
    """Start and end game sessions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def start(self, user_id: int, game_type: str, course_id: Optional[int] = None) -> GameSession:
        session = GameSession(user_id=user_id, course_id=course_id, game_type=game_type)
        self.db.add(session)
        await self.db.flush()
        await self.db.refresh(session)
        logger.info("Game session started", extra={"session_id": session.id, "user_id": user_id})
        return session

    async def get(self, session_id: int) -> Optional[GameSession]:
        return await self.db.get(GameSession, session_id)

    async def end(self, session_id: int, user_id: int, score: int, duration: int) -> Optional[GameSession]:
        """Mark a session completed. Returns None when it does not exist or belongs to someone else."""
        session = await self.get(session_id)
        if session is None or session.user_id != user_id:
            return None
        session.score = score
        session.duration = duration
        session.completed = True
        await self.db.flush()
        await self.db.refresh(session)
        return session
