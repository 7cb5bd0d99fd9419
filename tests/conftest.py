"""Pytest configuration: an in-memory store behind the repository functions."""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from audit import repository as audit_repository
from core.db import DatabaseError, UniqueViolationError
from main import create_app
from ratings import repository as ratings_repository
from students import repository as students_repository
from users import repository as users_repository

_EPOCH = datetime(2025, 12, 13, 10, 30, tzinfo=timezone.utc)


class FakeDatabase:
    """Stands in for `core.db.Database`; tables are plain Python containers."""

    def __init__(self) -> None:
        self.users: dict[int, dict[str, Any]] = {}
        self.students: dict[int, dict[str, Any]] = {}
        self.song_ratings: list[dict[str, Any]] = []
        self.audit_log: list[dict[str, Any]] = []
        self.failing: set[str] = set()
        self.connected = False
        self.executed: list[str] = []
        self._ids: dict[str, Iterator[int]] = {}
        self._clock = itertools.count(1)

    def next_id(self, table: str) -> int:
        return next(self._ids.setdefault(table, itertools.count(1)))

    def now(self) -> datetime:
        return _EPOCH + timedelta(seconds=next(self._clock))

    def check(self, operation: str) -> None:
        if operation in self.failing:
            raise DatabaseError(f"{operation}: connection refused")

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.connected = False

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        self.check("fetch_one")
        return {"current_time": self.now()}

    async def execute(self, sql: str, *args: Any) -> None:
        self.check("execute")
        self.executed.append(sql)


def _ensure_unique_email(table: dict[int, dict[str, Any]], email: str, *, exclude_id: int | None = None) -> None:
    for row_id, row in table.items():
        if row["email"] == email and row_id != exclude_id:
            raise UniqueViolationError('duplicate key value violates unique constraint "email_key"')


def _newest_first(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [dict(r) for r in sorted(rows, key=lambda r: (r["created_at"], r["id"]), reverse=True)]


# --- users ------------------------------------------------------------------


async def _list_users(db: FakeDatabase) -> list[dict[str, Any]]:
    db.check("users.list")
    return _newest_first(list(db.users.values()))


async def _get_user(db: FakeDatabase, user_id: int) -> dict[str, Any] | None:
    db.check("users.get")
    row = db.users.get(user_id)
    return dict(row) if row else None


async def _create_user(db: FakeDatabase, *, name: str, email: str) -> dict[str, Any]:
    db.check("users.create")
    _ensure_unique_email(db.users, email)
    row = {"id": db.next_id("users"), "name": name, "email": email, "created_at": db.now()}
    db.users[row["id"]] = row
    return dict(row)


async def _update_user(db: FakeDatabase, user_id: int, *, name: str, email: str) -> dict[str, Any] | None:
    db.check("users.update")
    row = db.users.get(user_id)
    if row is None:
        return None
    _ensure_unique_email(db.users, email, exclude_id=user_id)
    row.update(name=name, email=email)
    return dict(row)


async def _delete_user(db: FakeDatabase, user_id: int) -> dict[str, Any] | None:
    db.check("users.delete")
    row = db.users.pop(user_id, None)
    return dict(row) if row else None


# --- students ---------------------------------------------------------------


async def _list_students(db: FakeDatabase) -> list[dict[str, Any]]:
    db.check("students.list")
    return _newest_first(list(db.students.values()))


async def _get_student(db: FakeDatabase, student_id: int) -> dict[str, Any] | None:
    db.check("students.get")
    row = db.students.get(student_id)
    return dict(row) if row else None


async def _create_student(db: FakeDatabase, *, name: str, email: str, grade: str, major: str | None) -> dict[str, Any]:
    db.check("students.create")
    _ensure_unique_email(db.students, email)
    row = {
        "id": db.next_id("students"),
        "name": name,
        "email": email,
        "grade": grade,
        "major": major,
        "created_at": db.now(),
    }
    db.students[row["id"]] = row
    return dict(row)


async def _update_student(
    db: FakeDatabase,
    student_id: int,
    *,
    name: str,
    email: str,
    grade: str,
    major: str | None,
) -> dict[str, Any] | None:
    db.check("students.update")
    row = db.students.get(student_id)
    if row is None:
        return None
    _ensure_unique_email(db.students, email, exclude_id=student_id)
    row.update(name=name, email=email, grade=grade, major=major)
    return dict(row)


async def _delete_student(db: FakeDatabase, student_id: int) -> dict[str, Any] | None:
    db.check("students.delete")
    row = db.students.pop(student_id, None)
    return dict(row) if row else None


# --- ratings ----------------------------------------------------------------


def _votes_for(db: FakeDatabase, title: str, artist: str) -> list[dict[str, Any]]:
    return [r for r in db.song_ratings if r["song_title"] == title and r["song_artist"] == artist]


async def _count_by_type(db: FakeDatabase, *, title: str, artist: str) -> dict[str, int]:
    db.check("ratings.count")
    counts: dict[str, int] = {}
    for row in _votes_for(db, title, artist):
        counts[row["rating_type"]] = counts.get(row["rating_type"], 0) + 1
    return counts


async def _get_vote(db: FakeDatabase, *, title: str, artist: str, voter: str) -> str | None:
    db.check("ratings.get_vote")
    for row in _votes_for(db, title, artist):
        if row["user_ip"] == voter:
            return row["rating_type"]
    return None


async def _insert_vote(db: FakeDatabase, *, title: str, artist: str, rating: str, voter: str) -> None:
    db.check("ratings.insert")
    db.song_ratings.append(
        {
            "id": db.next_id("song_ratings"),
            "song_title": title,
            "song_artist": artist,
            "rating_type": rating,
            "user_ip": voter,
            "created_at": db.now(),
        }
    )


async def _update_vote(db: FakeDatabase, *, title: str, artist: str, rating: str, voter: str) -> None:
    db.check("ratings.update")
    for row in _votes_for(db, title, artist):
        if row["user_ip"] == voter:
            row.update(rating_type=rating, created_at=db.now())


# --- audit ------------------------------------------------------------------


async def _insert_entry(db: FakeDatabase, **fields: Any) -> None:
    db.check("audit.insert")
    db.audit_log.append({"id": db.next_id("audit_log"), **fields, "created_at": db.now()})


async def _list_entries(db: FakeDatabase, *, limit: int) -> list[dict[str, Any]]:
    db.check("audit.list")
    return _newest_first(db.audit_log)[:limit]


_FAKE_REPOSITORIES = [
    (users_repository, "list_users", _list_users),
    (users_repository, "get_user", _get_user),
    (users_repository, "create_user", _create_user),
    (users_repository, "update_user", _update_user),
    (users_repository, "delete_user", _delete_user),
    (students_repository, "list_students", _list_students),
    (students_repository, "get_student", _get_student),
    (students_repository, "create_student", _create_student),
    (students_repository, "update_student", _update_student),
    (students_repository, "delete_student", _delete_student),
    (ratings_repository, "count_by_type", _count_by_type),
    (ratings_repository, "get_vote", _get_vote),
    (ratings_repository, "insert_vote", _insert_vote),
    (ratings_repository, "update_vote", _update_vote),
    (audit_repository, "insert_entry", _insert_entry),
    (audit_repository, "list_entries", _list_entries),
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("TRUST_PROXY_HEADERS", "EXPOSE_ERROR_DETAIL", "DB_INIT_SCHEMA"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def db(monkeypatch: pytest.MonkeyPatch) -> FakeDatabase:
    fake = FakeDatabase()
    for module, name, func in _FAKE_REPOSITORIES:
        monkeypatch.setattr(module, name, func)
    return fake


@pytest.fixture()
def client(db: FakeDatabase) -> TestClient:
    # Not used as a context manager, so the lifespan (real pool) never runs.
    return TestClient(create_app(database=db))
