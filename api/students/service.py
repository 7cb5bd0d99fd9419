"""
Student business logic.

Mirrors the user flow; `grade` is required and `major` is optional (stored as
NULL when blank).
"""

from __future__ import annotations

from fastapi import BackgroundTasks

from audit import service as audit_service
from core import errors, validation
from core.db import Database, DatabaseError, UniqueViolationError

from . import repository, schemas

ENTITY_TYPE = "student"
LABEL = "student"

MISSING_FIELDS = "Name, email, and grade are required"
EMAIL_EXISTS = "Email already exists"
NOT_FOUND = "Student not found"


def _fields(payload: schemas.StudentPayload) -> dict:
    validation.require_fields(payload.model_dump(), ["name", "email", "grade"], MISSING_FIELDS)
    return {
        "name": validation.clean_text(payload.name),
        "email": validation.clean_text(payload.email),
        "grade": validation.clean_text(payload.grade),
        "major": validation.clean_text(payload.major),
    }


def _snapshot(row: dict) -> dict:
    return {
        "name": row["name"],
        "email": row["email"],
        "grade": row["grade"],
        "major": row["major"],
    }


async def list_students(db: Database) -> list[dict]:
    try:
        return await repository.list_students(db)
    except DatabaseError as exc:
        raise errors.StoreError("Failed to fetch students", detail=str(exc)) from exc


async def get_student(db: Database, raw_id: str) -> dict:
    student_id = validation.parse_id(raw_id, label=LABEL)
    try:
        row = await repository.get_student(db, student_id)
    except DatabaseError as exc:
        raise errors.StoreError("Failed to fetch student", detail=str(exc)) from exc
    if row is None:
        raise errors.NotFound(NOT_FOUND)
    return row


async def create_student(
    db: Database,
    payload: schemas.StudentPayload,
    *,
    background_tasks: BackgroundTasks,
    source_address: str | None = None,
) -> dict:
    fields = _fields(payload)

    try:
        row = await repository.create_student(db, **fields)
    except UniqueViolationError as exc:
        raise errors.Conflict(EMAIL_EXISTS) from exc
    except DatabaseError as exc:
        raise errors.StoreError("Failed to register student", detail=str(exc)) from exc

    audit_service.schedule(
        background_tasks,
        db,
        action=audit_service.CREATE,
        entity_type=ENTITY_TYPE,
        entity_id=int(row["id"]),
        actor_name=fields["name"],
        actor_email=fields["email"],
        changes=dict(fields),
        source_address=source_address,
    )
    return row


async def update_student(
    db: Database,
    raw_id: str,
    payload: schemas.StudentPayload,
    *,
    background_tasks: BackgroundTasks,
    source_address: str | None = None,
) -> dict:
    student_id = validation.parse_id(raw_id, label=LABEL)
    fields = _fields(payload)

    try:
        before = await repository.get_student(db, student_id)
        if before is None:
            raise errors.NotFound(NOT_FOUND)
        row = await repository.update_student(db, student_id, **fields)
    except UniqueViolationError as exc:
        raise errors.Conflict(EMAIL_EXISTS) from exc
    except DatabaseError as exc:
        raise errors.StoreError("Failed to update student", detail=str(exc)) from exc

    if row is None:
        raise errors.NotFound(NOT_FOUND)

    audit_service.schedule(
        background_tasks,
        db,
        action=audit_service.UPDATE,
        entity_type=ENTITY_TYPE,
        entity_id=student_id,
        actor_name=fields["name"],
        actor_email=fields["email"],
        changes={"before": _snapshot(before), "after": dict(fields)},
        source_address=source_address,
    )
    return row


async def delete_student(
    db: Database,
    raw_id: str,
    *,
    background_tasks: BackgroundTasks,
    source_address: str | None = None,
) -> dict:
    student_id = validation.parse_id(raw_id, label=LABEL)

    try:
        row = await repository.delete_student(db, student_id)
    except DatabaseError as exc:
        raise errors.StoreError("Failed to delete student", detail=str(exc)) from exc
    if row is None:
        raise errors.NotFound(NOT_FOUND)

    audit_service.schedule(
        background_tasks,
        db,
        action=audit_service.DELETE,
        entity_type=ENTITY_TYPE,
        entity_id=student_id,
        actor_name=row["name"],
        actor_email=row["email"],
        changes=_snapshot(row),
        source_address=source_address,
    )
    return row
