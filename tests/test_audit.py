"""Audit trail: recorded after each entity write, best effort, listed newest first."""

from __future__ import annotations

import asyncio
import logging

from audit import service as audit_service


def _logs(client) -> list[dict]:
    body = client.get("/api/audit").json()
    assert body["status"] == "success"
    assert body["count"] == len(body["logs"])
    return body["logs"]


def test_create_is_recorded(client) -> None:
    user = client.post("/api/users", json={"name": "Audit User", "email": "audit@example.com"}).json()["user"]

    (entry,) = _logs(client)

    assert entry["action"] == "CREATE"
    assert entry["entity_type"] == "user"
    assert entry["entity_id"] == user["id"]
    assert entry["user_name"] == "Audit User"
    assert entry["user_email"] == "audit@example.com"
    assert entry["changes"] == {"name": "Audit User", "email": "audit@example.com"}
    assert entry["ip_address"] == "testclient"
    assert entry["created_at"]


def test_update_records_before_and_after(client) -> None:
    user_id = client.post("/api/users", json={"name": "Before", "email": "b@example.com"}).json()["user"]["id"]
    client.put(f"/api/users/{user_id}", json={"name": "After", "email": "a@example.com"})

    update = next(log for log in _logs(client) if log["action"] == "UPDATE")

    assert update["entity_id"] == user_id
    assert update["user_name"] == "After"
    assert update["changes"] == {
        "before": {"name": "Before", "email": "b@example.com"},
        "after": {"name": "After", "email": "a@example.com"},
    }


def test_student_update_diff_includes_grade_and_major(client) -> None:
    payload = {"name": "S", "email": "s@example.com", "grade": "9", "major": "Art"}
    student_id = client.post("/api/students", json=payload).json()["student"]["id"]
    client.put(f"/api/students/{student_id}", json={**payload, "grade": "10", "major": None})

    update = next(log for log in _logs(client) if log["action"] == "UPDATE")

    assert update["entity_type"] == "student"
    assert update["changes"]["before"] == {"name": "S", "email": "s@example.com", "grade": "9", "major": "Art"}
    assert update["changes"]["after"] == {"name": "S", "email": "s@example.com", "grade": "10", "major": None}


def test_delete_records_snapshot(client) -> None:
    user_id = client.post("/api/users", json={"name": "Gone", "email": "gone@example.com"}).json()["user"]["id"]
    client.delete(f"/api/users/{user_id}")

    logs = _logs(client)

    assert [log["action"] for log in logs] == ["DELETE", "CREATE"]
    assert logs[0]["entity_id"] == user_id
    assert logs[0]["changes"] == {"name": "Gone", "email": "gone@example.com"}


def test_failed_operations_are_not_recorded(client) -> None:
    client.post("/api/users", json={"name": "A"})
    client.delete("/api/users/404")

    assert _logs(client) == []


def test_audit_failure_does_not_fail_the_write(client, db, caplog) -> None:
    db.failing.add("audit.insert")

    with caplog.at_level(logging.ERROR, logger="audit.service"):
        response = client.post("/api/users", json={"name": "A", "email": "a@example.com"})

    assert response.status_code == 201
    assert db.audit_log == []
    assert "audit_record_failed action=CREATE entity_type=user entity_id=1" in caplog.text


def test_record_swallows_errors(db) -> None:
    db.failing.add("audit.insert")

    asyncio.run(
        audit_service.record(
            db,
            action=audit_service.DELETE,
            entity_type="student",
            entity_id=3,
            actor_name=None,
            actor_email=None,
            changes=None,
            source_address=None,
        )
    )

    assert db.audit_log == []


def test_listing_is_capped(client, db) -> None:
    for entity_id in range(1, 1006):
        db.audit_log.append(
            {
                "id": db.next_id("audit_log"),
                "action": "CREATE",
                "entity_type": "user",
                "entity_id": entity_id,
                "user_name": "n",
                "user_email": "e",
                "changes": {},
                "ip_address": "127.0.0.1",
                "created_at": db.now(),
            }
        )

    logs = _logs(client)

    assert len(logs) == 1000
    assert logs[0]["entity_id"] == 1005


def test_listing_store_failure(client, db) -> None:
    db.failing.add("audit.list")

    response = client.get("/api/audit")

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to fetch audit logs"
