"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. The application constructs one in its
lifespan, opens it on startup and closes it on shutdown (see `api/main.py`),
then hands it to route handlers through `Depends(get_database)`.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Driver failures never leave this module raw: they are re-raised as
`DatabaseError`, or `UniqueViolationError` for SQLSTATE 23505.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import config

logger = logging.getLogger(__name__)


class DatabaseError(RuntimeError):
    pass


class UniqueViolationError(DatabaseError):
    pass


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except asyncpg.exceptions.UniqueViolationError as exc:
        raise UniqueViolationError(str(exc)) from exc
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
        raise DatabaseError(str(exc) or exc.__class__.__name__) from exc


class Database:
    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 5,
        command_timeout: float = 30.0,
        ssl: bool = False,
    ) -> None:
        self._dsn = _sanitize_database_url(dsn)
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._ssl = ssl
        self._pool: asyncpg.Pool | None = None

    @classmethod
    def from_env(cls) -> Database:
        return cls(
            config.database_url(),
            min_size=config.db_pool_min_size(),
            max_size=config.db_pool_max_size(),
            command_timeout=config.db_command_timeout(),
            ssl=config.db_ssl(),
        )

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        with _translate_errors():
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=self._command_timeout,
                ssl="require" if self._ssl else None,
            )
        logger.info("db_pool_opened min_size=%s max_size=%s", self._min_size, self._max_size)

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None
        logger.info("db_pool_closed")

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise DatabaseError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        with _translate_errors():
            row = await self.pool().fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        with _translate_errors():
            rows = await self.pool().fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> None:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
        """
        with _translate_errors():
            await self.pool().execute(sql, *args)


def get_database(request: Request) -> Database:
    return request.app.state.db
