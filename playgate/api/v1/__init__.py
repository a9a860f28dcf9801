"""
API v1 routes.
"""

from fastapi import APIRouter

from playgate.api.v1 import lessons, policies, questions, sessions

router = APIRouter()

router.include_router(policies.router, prefix="/policies", tags=["Policies"])
router.include_router(questions.router, prefix="/questions", tags=["Questions"])
router.include_router(sessions.router, prefix="/sessions", tags=["Game Sessions"])
router.include_router(lessons.router, prefix="/lessons", tags=["Lessons"])
