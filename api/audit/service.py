"""
Audit recorder.

Entity services queue `record` as a FastAPI background task after their
primary write. It runs once the response is produced and must never raise
into the request path: failures are logged and dropped.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import BackgroundTasks

from core import config, errors
from core.db import Database, DatabaseError

from . import repository

CREATE = "CREATE"
UPDATE = "UPDATE"
DELETE = "DELETE"

logger = logging.getLogger(__name__)


async def record(
    db: Database,
    *,
    action: str,
    entity_type: str,
    entity_id: int,
    actor_name: str | None,
    actor_email: str | None,
    changes: dict[str, Any] | None,
    source_address: str | None,
) -> None:
    try:
        await repository.insert_entry(
            db,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            user_name=actor_name,
            user_email=actor_email,
            changes=changes,
            ip_address=source_address,
        )
    except Exception:
        logger.exception(
            "audit_record_failed action=%s entity_type=%s entity_id=%s",
            action,
            entity_type,
            entity_id,
        )


def schedule(
    background_tasks: BackgroundTasks,
    db: Database,
    *,
    action: str,
    entity_type: str,
    entity_id: int,
    actor_name: str | None,
    actor_email: str | None,
    changes: dict[str, Any] | None,
    source_address: str | None,
) -> None:
    background_tasks.add_task(
        record,
        db,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        actor_name=actor_name,
        actor_email=actor_email,
        changes=changes,
        source_address=source_address,
    )


async def recent_entries(db: Database) -> list[dict[str, Any]]:
    try:
        return await repository.list_entries(db, limit=config.AUDIT_LOG_LIMIT)
    except DatabaseError as exc:
        raise errors.StoreError("Failed to fetch audit logs", detail=str(exc)) from exc
