"""
User business logic.
"""

from __future__ import annotations

from fastapi import BackgroundTasks

from audit import service as audit_service
from core import errors, validation
from core.db import Database, DatabaseError, UniqueViolationError

from . import repository, schemas

ENTITY_TYPE = "user"
LABEL = "user"

MISSING_FIELDS = "Name and email are required"
EMAIL_EXISTS = "Email already exists"
NOT_FOUND = "User not found"


def _required_fields(payload: schemas.UserPayload) -> tuple[str, str]:
    validation.require_fields(payload.model_dump(), ["name", "email"], MISSING_FIELDS)
    return validation.clean_text(payload.name), validation.clean_text(payload.email)


def _snapshot(row: dict) -> dict:
    return {"name": row["name"], "email": row["email"]}


async def list_users(db: Database) -> list[dict]:
    try:
        return await repository.list_users(db)
    except DatabaseError as exc:
        raise errors.StoreError("Failed to fetch users", detail=str(exc)) from exc


async def get_user(db: Database, raw_id: str) -> dict:
    user_id = validation.parse_id(raw_id, label=LABEL)
    try:
        row = await repository.get_user(db, user_id)
    except DatabaseError as exc:
        raise errors.StoreError("Failed to fetch user", detail=str(exc)) from exc
    if row is None:
        raise errors.NotFound(NOT_FOUND)
    return row


async def create_user(
    db: Database,
    payload: schemas.UserPayload,
    *,
    background_tasks: BackgroundTasks,
    source_address: str | None = None,
) -> dict:
    name, email = _required_fields(payload)

    try:
        row = await repository.create_user(db, name=name, email=email)
    except UniqueViolationError as exc:
        raise errors.Conflict(EMAIL_EXISTS) from exc
    except DatabaseError as exc:
        raise errors.StoreError("Failed to create user", detail=str(exc)) from exc

    audit_service.schedule(
        background_tasks,
        db,
        action=audit_service.CREATE,
        entity_type=ENTITY_TYPE,
        entity_id=int(row["id"]),
        actor_name=name,
        actor_email=email,
        changes={"name": name, "email": email},
        source_address=source_address,
    )
    return row


async def update_user(
    db: Database,
    raw_id: str,
    payload: schemas.UserPayload,
    *,
    background_tasks: BackgroundTasks,
    source_address: str | None = None,
) -> dict:
    user_id = validation.parse_id(raw_id, label=LABEL)
    name, email = _required_fields(payload)

    try:
        before = await repository.get_user(db, user_id)
        if before is None:
            raise errors.NotFound(NOT_FOUND)
        row = await repository.update_user(db, user_id, name=name, email=email)
    except UniqueViolationError as exc:
        raise errors.Conflict(EMAIL_EXISTS) from exc
    except DatabaseError as exc:
        raise errors.StoreError("Failed to update user", detail=str(exc)) from exc

    # Deleted between the read and the write.
    if row is None:
        raise errors.NotFound(NOT_FOUND)

    audit_service.schedule(
        background_tasks,
        db,
        action=audit_service.UPDATE,
        entity_type=ENTITY_TYPE,
        entity_id=user_id,
        actor_name=name,
        actor_email=email,
        changes={"before": _snapshot(before), "after": {"name": name, "email": email}},
        source_address=source_address,
    )
    return row


async def delete_user(
    db: Database,
    raw_id: str,
    *,
    background_tasks: BackgroundTasks,
    source_address: str | None = None,
) -> dict:
    user_id = validation.parse_id(raw_id, label=LABEL)

    try:
        row = await repository.delete_user(db, user_id)
    except DatabaseError as exc:
        raise errors.StoreError("Failed to delete user", detail=str(exc)) from exc
    if row is None:
        raise errors.NotFound(NOT_FOUND)

    audit_service.schedule(
        background_tasks,
        db,
        action=audit_service.DELETE,
        entity_type=ENTITY_TYPE,
        entity_id=user_id,
        actor_name=row["name"],
        actor_email=row["email"],
        changes=_snapshot(row),
        source_address=source_address,
    )
    return row
