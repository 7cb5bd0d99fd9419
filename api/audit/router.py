"""
Audit log API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from core.db import Database, get_database

from . import service

router = APIRouter()


@router.get("/api/audit")
async def list_audit_logs(db: Database = Depends(get_database)) -> dict:
    """
    Newest entries first, capped at 1000.
    """
    logs = await service.recent_entries(db)
    return {"status": "success", "count": len(logs), "logs": logs}
