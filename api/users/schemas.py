"""
User API schemas (request models).

Fields are optional at the schema level so that missing values produce the
API's own "Name and email are required" error instead of a schema error.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from core.validation import scalar_text


class UserPayload(BaseModel):
    name: str | None = None
    email: str | None = None

    _numbers_as_text = field_validator("name", "email", mode="before")(scalar_text)
