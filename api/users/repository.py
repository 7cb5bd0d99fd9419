"""
User persistence helpers.
"""

from __future__ import annotations

from typing import Any

from core.db import Database


async def list_users(db: Database) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, name, email, created_at
        FROM users
        ORDER BY created_at DESC, id DESC
        """
    )


async def get_user(db: Database, user_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT id, name, email, created_at
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def create_user(db: Database, *, name: str, email: str) -> dict[str, Any]:
    row = await db.fetch_one(
        """
        INSERT INTO users (name, email)
        VALUES ($1, $2)
        RETURNING id, name, email, created_at
        """,
        name,
        email,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def update_user(db: Database, user_id: int, *, name: str, email: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        UPDATE users
        SET name = $1,
            email = $2
        WHERE id = $3
        RETURNING id, name, email, created_at
        """,
        name,
        email,
        user_id,
    )


async def delete_user(db: Database, user_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        DELETE FROM users
        WHERE id = $1
        RETURNING id, name, email, created_at
        """,
        user_id,
    )
