"""
Common schema types used across the API.
"""

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Machine-readable code plus a message a game client can show."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Body of 4xx responses raised with an ErrorDetail."""

    detail: ErrorDetail


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    database: str = "connected"


def error_detail(code: str, message: str) -> dict:
    """HTTPException detail payload."""
    return ErrorDetail(code=code, message=message).model_dump()
