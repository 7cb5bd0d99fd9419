"""
Student persistence helpers.
"""

from __future__ import annotations

from typing import Any

from core.db import Database


async def list_students(db: Database) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, name, email, grade, major, created_at
        FROM students
        ORDER BY created_at DESC, id DESC
        """
    )


async def get_student(db: Database, student_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT id, name, email, grade, major, created_at
        FROM students
        WHERE id = $1
        """,
        student_id,
    )


async def create_student(
    db: Database,
    *,
    name: str,
    email: str,
    grade: str,
    major: str | None,
) -> dict[str, Any]:
    row = await db.fetch_one(
        """
        INSERT INTO students (name, email, grade, major)
        VALUES ($1, $2, $3, $4)
        RETURNING id, name, email, grade, major, created_at
        """,
        name,
        email,
        grade,
        major,
    )
    if row is None:
        raise RuntimeError("Failed to create student.")
    return row


async def update_student(
    db: Database,
    student_id: int,
    *,
    name: str,
    email: str,
    grade: str,
    major: str | None,
) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        UPDATE students
        SET name = $1,
            email = $2,
            grade = $3,
            major = $4
        WHERE id = $5
        RETURNING id, name, email, grade, major, created_at
        """,
        name,
        email,
        grade,
        major,
        student_id,
    )


async def delete_student(db: Database, student_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        DELETE FROM students
        WHERE id = $1
        RETURNING id, name, email, grade, major, created_at
        """,
        student_id,
    )
