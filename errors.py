"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. The global exception handler
converts AppError subclasses to ``{"message": ...}`` JSON responses.

Non-AppError exceptions become a generic 500 (with Sentry reporting when
configured); their details never reach the client.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.logging import get_logger

log = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "oops, something went wrong on our side"


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        # field/details are kept for logging only; the wire shape is fixed
        return {"message": self.message}


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class CaptchaUnavailableError(AppError):
    """The verification service could not be reached or gave an unusable reply."""

    error_code = "captcha_unavailable"

    def __init__(self, *, details: Optional[Any] = None) -> None:
        super().__init__(INTERNAL_ERROR_MESSAGE, details=details)


class CaptchaRejectedError(AppError):
    """The verification service answered, and the answer was "not human"."""

    error_code = "captcha_rejected"


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        log.info(
            "request_failed",
            path=request.url.path,
            status_code=exc.status_code,
            error_code=exc.error_code,
            field=exc.field,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        log.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={"message": INTERNAL_ERROR_MESSAGE},
        )
