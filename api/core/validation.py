"""
Small input helpers shared by the entity routers.
"""

from __future__ import annotations

from typing import Any

from . import errors

# Ids are SERIAL (int4) columns.
MAX_ID = 2**31 - 1


def parse_id(raw: str, *, label: str) -> int:
    """
    Parse a path identifier; only positive base-10 integers are accepted.

    Well-formed ids beyond the column range cannot name a row, so they are
    reported as not found rather than sent to the store.
    """
    value = (raw or "").strip()
    if not value.isascii() or not value.isdigit():
        raise errors.InvalidIdentifier(f"Invalid {label} ID")
    digits = value.lstrip("0")
    if not digits:
        raise errors.InvalidIdentifier(f"Invalid {label} ID")
    if len(digits) > len(str(MAX_ID)) or int(digits) > MAX_ID:
        raise errors.NotFound(f"{label.capitalize()} not found")
    return int(digits)


def scalar_text(value: Any) -> Any:
    """
    Field validator: JSON numbers become text, as form posts would send them.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


def clean_text(value: Any) -> str | None:
    """
    Normalize an optional text field: None and blank strings become None.
    """
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def require_fields(fields: dict[str, Any], required: list[str], message: str) -> None:
    if any(clean_text(fields.get(name)) is None for name in required):
        raise errors.ValidationError(message)
