"""
Liveness and database connectivity checks.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from core import errors
from core.db import Database, DatabaseError, get_database

router = APIRouter()


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/api/health")
def health() -> dict:
    return {"status": "ok", "timestamp": _utc_now_iso()}


@router.get("/api/test-db")
async def test_db(db: Database = Depends(get_database)) -> dict:
    # Single round trip, no retry.
    try:
        row = await db.fetch_one("SELECT now() AS current_time")
    except DatabaseError as exc:
        raise errors.StoreError("Database connection failed", detail=str(exc)) from exc

    return {
        "status": "success",
        "message": "Database connection successful",
        "data": row,
    }
