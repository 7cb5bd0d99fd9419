"""
Pydantic schemas for rating endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from core.validation import scalar_text


class RatingRequest(BaseModel):
    title: str | None = None
    artist: str | None = None
    rating: str | None = None

    _numbers_as_text = field_validator("title", "artist", "rating", mode="before")(scalar_text)
