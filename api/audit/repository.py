"""
Audit log persistence.
This module is where audit-related SQL lives; the table is append-only.
"""

from __future__ import annotations

import json
from typing import Any

from core.db import Database


def _json_arg(value: dict[str, Any] | None) -> str | None:
    """
    asyncpg does not automatically encode Python dicts for json/jsonb parameters.
    We pass JSON as a string and cast to jsonb in SQL.
    """
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=True, default=str)


def _decode_changes(row: dict[str, Any]) -> dict[str, Any]:
    changes = row.get("changes")
    if isinstance(changes, str):
        row["changes"] = json.loads(changes)
    return row


async def insert_entry(
    db: Database,
    *,
    action: str,
    entity_type: str,
    entity_id: int,
    user_name: str | None,
    user_email: str | None,
    changes: dict[str, Any] | None,
    ip_address: str | None,
) -> None:
    await db.execute(
        """
        INSERT INTO audit_log (action, entity_type, entity_id, user_name, user_email, changes, ip_address)
        VALUES ($1, $2, $3, $4, $5, $6::jsonb, $7)
        """,
        action,
        entity_type,
        entity_id,
        user_name,
        user_email,
        _json_arg(changes),
        ip_address,
    )


async def list_entries(db: Database, *, limit: int) -> list[dict[str, Any]]:
    rows = await db.fetch_all(
        """
        SELECT id, action, entity_type, entity_id, user_name, user_email,
               changes, ip_address, created_at
        FROM audit_log
        ORDER BY created_at DESC, id DESC
        LIMIT $1
        """,
        limit,
    )
    return [_decode_changes(row) for row in rows]
