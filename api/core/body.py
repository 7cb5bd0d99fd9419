"""
Request body parsing for the entity and rating endpoints.

Bodies may be JSON objects or HTML form posts (urlencoded or multipart). An
empty body is treated as an object with no fields so the services can report
which fields are missing.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import pydantic
from fastapi import Request

from . import errors

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

INVALID_BODY = "Invalid request body"

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _invalid(request: Request, reason: str) -> errors.ValidationError:
    logger.info("invalid_request_body method=%s path=%s reason=%s", request.method, request.url.path, reason)
    return errors.ValidationError(INVALID_BODY)


async def read_fields(request: Request) -> dict[str, Any]:
    content_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    if content_type in _FORM_TYPES:
        form = await request.form()
        # Repeated keys keep their last value.
        return {key: value for key, value in form.multi_items() if isinstance(value, str)}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise _invalid(request, "malformed_json") from exc
    if not isinstance(data, dict):
        raise _invalid(request, "not_an_object")
    return data


def body_of(model: type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    """
    Build a dependency that parses the request body into `model`.
    """

    async def dependency(request: Request) -> ModelT:
        fields = await read_fields(request)
        try:
            return model.model_validate(fields)
        except pydantic.ValidationError as exc:
            raise _invalid(request, "wrong_field_type") from exc

    return dependency
