"""
Presentation helpers shared by the pages that consume the API.

Pure functions: HTML escaping, date formatting, form serialization and
email-shape checks. No I/O, no module state.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DEFAULT_ERROR_MESSAGE = "An error occurred"


def escape_html(text: str | None) -> str:
    """
    Escape `& < > " '` for safe interpolation into markup.
    """
    if not text:
        return ""
    return html.escape(str(text), quote=True)


def _to_datetime(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        raw = value.strip()
        # fromisoformat() only accepts a trailing "Z" from 3.11 on.
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date(value: str | datetime) -> str:
    """
    "2025-12-13T10:30:00Z" -> "Dec 13, 2025, 10:30 AM"
    """
    dt = _to_datetime(value)
    return f"{dt:%b} {dt.day}, {dt.year}, {dt:%I:%M %p}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''} ago"


def relative_time(value: str | datetime, *, now: datetime | None = None) -> str:
    """
    Short "time ago" label; empty once the value is a week old.
    """
    dt = _to_datetime(value)
    now = now or datetime.now(timezone.utc)
    elapsed_s = (now - dt).total_seconds()

    minutes = int(elapsed_s // 60)
    hours = int(elapsed_s // 3600)
    days = int(elapsed_s // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return _plural(minutes, "min")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 7:
        return _plural(days, "day")
    return ""


def format_timestamp(value: str | datetime, *, now: datetime | None = None) -> str:
    dt = _to_datetime(value)
    formatted = f"{dt:%b} {dt.day}, {dt.year}, {dt:%I:%M:%S %p}"
    time_ago = relative_time(dt, now=now)
    if not time_ago:
        return formatted
    return f'{formatted}<br><small style="color: #3b82f6; font-weight: 600;">{time_ago}</small>'


def get_form_data(fields: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """
    Flatten submitted form fields into a plain dict; the last value for a
    repeated key wins.
    """
    if hasattr(fields, "multi_items"):
        pairs = fields.multi_items()
    elif isinstance(fields, Mapping):
        pairs = fields.items()
    else:
        pairs = fields

    data: dict[str, Any] = {}
    for key, value in pairs:
        data[key] = value
    return data


def is_valid_email(email: str | None) -> bool:
    if not email:
        return False
    return _EMAIL_RE.fullmatch(email) is not None


def response_message(payload: Mapping[str, Any] | None, *, ok: bool) -> str | None:
    """
    Message to surface for an API response, or None for successful calls.
    """
    if ok:
        return None
    return str((payload or {}).get("message") or DEFAULT_ERROR_MESSAGE)
