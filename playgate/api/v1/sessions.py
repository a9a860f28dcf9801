"""
Game session endpoints. Finished sessions feed the daily play counters.
"""

from fastapi import APIRouter, HTTPException, status

from playgate.api.deps import CurrentUserId, DbSession
from playgate.providers.sql import SqlGameSessionStore
from playgate.schemas.common import ErrorResponse, error_detail
from playgate.schemas.session import SessionEndRequest, SessionResponse, SessionStartRequest

router = APIRouter()


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def start_session(
    data: SessionStartRequest,
    user_id: CurrentUserId,
    db: DbSession,
):
    store = SqlGameSessionStore(db)
    return await store.start(user_id, data.game_type, course_id=data.course_id)


@router.put(
    "/{session_id}/end",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def end_session(
    session_id: int,
    data: SessionEndRequest,
    user_id: CurrentUserId,
    db: DbSession,
):
    """Record score and duration. Only the learner who started the session may end it."""
    store = SqlGameSessionStore(db)
    session = await store.end(session_id, user_id, data.score, data.duration)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_detail("session_not_found", "Game session not found"),
        )
    return session
