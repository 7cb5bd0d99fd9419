"""
Student API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from core.body import body_of
from core.client import client_address
from core.db import Database, get_database

from . import schemas, service

router = APIRouter()

_payload = body_of(schemas.StudentPayload)


@router.get("/api/students")
async def list_students(db: Database = Depends(get_database)) -> dict:
    students = await service.list_students(db)
    return {"status": "success", "count": len(students), "students": students}


@router.post("/api/students", status_code=201)
async def create_student(
    request: Request,
    background_tasks: BackgroundTasks,
    payload: schemas.StudentPayload = Depends(_payload),
    db: Database = Depends(get_database),
) -> dict:
    student = await service.create_student(
        db,
        payload,
        background_tasks=background_tasks,
        source_address=client_address(request),
    )
    return {"status": "success", "message": "Student registered successfully", "student": student}


@router.get("/api/students/{student_id}")
async def get_student(student_id: str, db: Database = Depends(get_database)) -> dict:
    student = await service.get_student(db, student_id)
    return {"status": "success", "student": student}


@router.put("/api/students/{student_id}")
async def update_student(
    student_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    payload: schemas.StudentPayload = Depends(_payload),
    db: Database = Depends(get_database),
) -> dict:
    student = await service.update_student(
        db,
        student_id,
        payload,
        background_tasks=background_tasks,
        source_address=client_address(request),
    )
    return {"status": "success", "message": "Student updated successfully", "student": student}


@router.delete("/api/students/{student_id}")
async def delete_student(
    student_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Database = Depends(get_database),
) -> dict:
    student = await service.delete_student(
        db,
        student_id,
        background_tasks=background_tasks,
        source_address=client_address(request),
    )
    return {"status": "success", "message": "Student deleted successfully", "student": student}
