"""
Custom exception hierarchy for Mooda.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing human messages.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class MoodaException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class UserNotFoundError(MoodaException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "USER_NOT_FOUND"

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User {user_id} not found.",
            details={"user_id": user_id},
        )


class PersonalityNotFoundError(MoodaException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "PERSONALITY_NOT_FOUND"

    def __init__(self, personality_id: str):
        super().__init__(
            message=f"Personality {personality_id} not found.",
            details={"personality_id": personality_id},
        )


class EmotionLogNotFoundError(MoodaException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "EMOTION_LOG_NOT_FOUND"

    def __init__(self, user_id: str, day: date):
        super().__init__(
            message=f"No emotion log for user {user_id} on {day}.",
            details={"user_id": user_id, "date": str(day)},
        )


class UserFetchError(MoodaException):
    """The batch could not load its working set of users; the run is aborted."""
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "USER_FETCH_FAILED"

    def __init__(self, reason: str):
        super().__init__(
            message="Could not load users for the daily summary run.",
            details={"reason": reason},
        )


class ChatGenerationError(MoodaException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "CHAT_FAILED"

    def __init__(self, message: str):
        super().__init__(message=message)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def mooda_exception_handler(request: Request, exc: MoodaException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
