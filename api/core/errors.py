"""
API error taxonomy and the JSON error envelope.

Services raise `ApiError` subclasses; `register_exception_handlers` renders
them as `{"status": "error", "message": ..., "code": ...}`.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import config

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(ApiError):
    status_code = 400
    code = "validation_error"


class InvalidIdentifier(ApiError):
    status_code = 400
    code = "invalid_identifier"


class NotFound(ApiError):
    status_code = 404
    code = "not_found"


class Conflict(ApiError):
    status_code = 409
    code = "conflict"


class InvalidRating(ValidationError):
    code = "invalid_rating"


class DuplicateVote(ApiError):
    status_code = 400
    code = "duplicate_vote"


class StoreError(ApiError):
    status_code = 500
    code = "store_error"


def error_body(exc: ApiError) -> dict:
    body = {"status": "error", "message": exc.message, "code": exc.code}
    if exc.detail and config.expose_error_detail():
        body["error"] = exc.detail
    return body


async def _handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "request_failed method=%s path=%s code=%s detail=%s",
            request.method,
            request.url.path,
            exc.code,
            exc.detail,
            exc_info=exc.__cause__,
        )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Parameters FastAPI validates itself; bodies go through core.body.
    logger.info("invalid_request_body method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=400,
        content=error_body(ValidationError("Invalid request body")),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _handle_api_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
