"""
Question gate endpoints - serve a question, validate an answer.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import JSONResponse

from playgate.api.deps import CurrentUserId, DbSession, Engine, Runtime
from playgate.engines.gate.types import ValidationStatus
from playgate.providers.sql import SqlGameSessionStore
from playgate.schemas.common import ErrorResponse, error_detail
from playgate.schemas.question import (
    QuestionResponse,
    ValidateAnswerRequest,
    ValidateAnswerResponse,
)

router = APIRouter()


async def _require_own_session(db, session_id: Optional[int], user_id: int) -> None:
    if session_id is None:
        return
    session = await SqlGameSessionStore(db).get(session_id)
    if session is None or session.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_detail("session_not_found", "Game session not found"),
        )


@router.get(
    "",
    response_model=QuestionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_question(
    user_id: CurrentUserId,
    engine: Engine,
    db: DbSession,
    runtime: Runtime,
    quiz_id: int = Query(..., ge=1),
    session_id: Optional[int] = Query(default=None),
    exclude: List[int] = Query(default=[]),
    difficulty: Optional[str] = Query(default=None, max_length=50),
    question_id: Optional[int] = Query(default=None),
):
    """Serve one question from a quiz without its correct answer."""
    await _require_own_session(db, session_id, user_id)
    runtime.question_cache.cleanup_expired()

    question = await engine.get_question(
        quiz_id,
        user_id,
        exclude=exclude,
        difficulty=difficulty,
        question_id=question_id,
    )
    if question is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_detail("no_questions", "No questions available"),
        )
    return QuestionResponse.model_validate(question.model_dump(mode="json"))


@router.post(
    "/validate",
    response_model=ValidateAnswerResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 410: {"model": ErrorResponse}},
)
async def validate_answer(
    data: ValidateAnswerRequest,
    user_id: CurrentUserId,
    engine: Engine,
    db: DbSession,
):
    """Grade an answer. Each served question can be graded once."""
    await _require_own_session(db, data.session_id, user_id)

    result = await engine.validate_answer(
        data.question_id,
        user_id,
        data.answer,
        session_id=data.session_id,
    )
    if result.status == ValidationStatus.EXPIRED:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail=error_detail("question_expired", result.message),
        )
    if result.status == ValidationStatus.INVALID_ANSWER:
        # Returned rather than raised so the recorded attempt is committed
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": error_detail("invalid_answer", result.message)},
        )
    return ValidateAnswerResponse(**result.model_dump())
