"""
User API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from core.body import body_of
from core.client import client_address
from core.db import Database, get_database

from . import schemas, service

router = APIRouter()

_payload = body_of(schemas.UserPayload)


@router.get("/api/users")
async def list_users(db: Database = Depends(get_database)) -> dict:
    users = await service.list_users(db)
    return {"status": "success", "count": len(users), "users": users}


@router.post("/api/users", status_code=201)
async def create_user(
    request: Request,
    background_tasks: BackgroundTasks,
    payload: schemas.UserPayload = Depends(_payload),
    db: Database = Depends(get_database),
) -> dict:
    user = await service.create_user(
        db,
        payload,
        background_tasks=background_tasks,
        source_address=client_address(request),
    )
    return {"status": "success", "message": "User created successfully", "user": user}


@router.get("/api/users/{user_id}")
async def get_user(user_id: str, db: Database = Depends(get_database)) -> dict:
    user = await service.get_user(db, user_id)
    return {"status": "success", "user": user}


@router.put("/api/users/{user_id}")
async def update_user(
    user_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    payload: schemas.UserPayload = Depends(_payload),
    db: Database = Depends(get_database),
) -> dict:
    user = await service.update_user(
        db,
        user_id,
        payload,
        background_tasks=background_tasks,
        source_address=client_address(request),
    )
    return {"status": "success", "message": "User updated successfully", "user": user}


@router.delete("/api/users/{user_id}")
async def delete_user(
    user_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Database = Depends(get_database),
) -> dict:
    user = await service.delete_user(
        db,
        user_id,
        background_tasks=background_tasks,
        source_address=client_address(request),
    )
    return {"status": "success", "message": "User deleted successfully", "user": user}
