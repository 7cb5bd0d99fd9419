"""
Student API schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from core.validation import scalar_text


class StudentPayload(BaseModel):
    name: str | None = None
    email: str | None = None
    # Forms send grades as text ("10", "Sophomore"); JSON clients may send numbers.
    grade: str | None = None
    major: str | None = None

    _numbers_as_text = field_validator("name", "email", "grade", "major", mode="before")(scalar_text)
