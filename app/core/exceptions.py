"""
Domain errors and global exception handlers — prevents stack-trace leakage to clients.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


# ── Domain errors ───────────────────────────────────────────────────
class AppError(Exception):
    """Base class for errors that map onto a client-facing status code."""

    status_code = 400
    default_detail = "Bad request"

    def __init__(
        self,
        detail: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        self.detail = detail or self.default_detail
        self.errors = errors
        super().__init__(self.detail)


class NotFoundError(AppError):
    status_code = 404
    default_detail = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    default_detail = "Resource already exists"


class ValidationFailedError(AppError):
    """Request was well-formed but breaks a business rule; carries field detail."""

    status_code = 400
    default_detail = "One or more validation errors occurred"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(errors={field: [message]})
        self.field = field
        self.message = message


class NotDeletedError(AppError):
    status_code = 400
    default_detail = "Resource is not deleted"


# ── Handlers ────────────────────────────────────────────────────────
def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _body(detail: Any, **extra: Any) -> dict[str, Any]:
    return {"detail": detail, "success": False, "timestamp": _timestamp(), **extra}


async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def _app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    extra = {"errors": exc.errors} if exc.errors else {}
    return JSONResponse(status_code=exc.status_code, content=_body(exc.detail, **extra))


async def _request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.setdefault(".".join(loc) or "request", []).append(err.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=400,
        content=_body("One or more validation errors occurred", errors=errors),
    )


async def _rate_limit_handler(_request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit exceeded: %s", exc.detail)
    return JSONResponse(status_code=429, content=_body("Too many requests"))


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return JSONResponse(status_code=409, content=_body("Database constraint violation"))


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(status_code=500, content=_body("Internal database error"))


async def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception on %s %s: %s", request.method, request.url.path, exc
    )
    return JSONResponse(status_code=500, content=_body("Internal server error"))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
