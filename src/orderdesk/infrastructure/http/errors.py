"""Translation of domain exceptions into HTTP responses.

Internal failures are logged with their traceback and answered with a
generic message; nothing about the exception reaches the client.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from orderdesk.domain.exceptions import (
    AuthError,
    ConflictError,
    EntityNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _field_path(location: tuple) -> str:
    parts = [str(part) for part in location if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        content: dict = {"message": str(exc)}
        if exc.violations:
            content["violations"] = exc.violations
        return JSONResponse(status_code=400, content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        violations: dict[str, list[str]] = {}
        for error in exc.errors():
            violations.setdefault(_field_path(tuple(error.get("loc", ()))), []).append(
                error.get("msg", "Invalid value")
            )
        logger.warning("Rejected malformed request to %s: %s", request.url.path, violations)
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request body", "violations": violations},
        )

    @app.exception_handler(ConflictError)
    async def conflict_error(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"message": str(exc)})

    @app.exception_handler(EntityNotFoundError)
    async def not_found_error(request: Request, exc: EntityNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"message": str(exc)})

    @app.exception_handler(AuthError)
    async def auth_error(request: Request, exc: AuthError) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content={"message": str(exc)},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(status_code=500, content={"message": "Internal server error"})
