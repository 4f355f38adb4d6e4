from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

import api.deps
from api_server import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def fake_generators(monkeypatch):
    monkeypatch.setattr(api.deps, "generate_questions", lambda request: ["Only question?"])
    monkeypatch.setattr(api.deps, "generate_ideal_answer", lambda question, **_: "Ideal")


def _create(user="user-1"):
    resp = client.post(
        "/api/interview/create",
        json={"jobRole": "Analyst", "experience": "2 years", "email": f"{user}@example.com"},
        headers={"X-User-Id": user},
    )
    assert resp.status_code == 201
    return resp.json()["interview"]["id"]


def _future(days=1):
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def test_admin_edit_and_delete_interview():
    interview_id = _create()
    edited = client.put(
        f"/api/admin/interviews/{interview_id}",
        json={"status": "completed", "score": 80, "overallFeedback": "Edited"},
    )
    assert edited.status_code == 200
    interview = edited.json()["interview"]
    assert interview["status"] == "completed"
    assert interview["score"] == 80
    assert interview["jobRole"] == "Analyst"

    assert client.put(f"/api/admin/interviews/{interview_id}", json={"score": 120}).status_code == 400
    assert client.put("/api/admin/interviews/missing", json={"score": 10}).status_code == 404

    assert client.delete(f"/api/admin/interviews/{interview_id}").json()["message"] == "Interview deleted"
    assert client.get(f"/api/interview/{interview_id}").status_code == 404
    assert client.delete(f"/api/admin/interviews/{interview_id}").status_code == 404


def test_plan_changes_lift_quota():
    for _ in range(3):
        _create()
    users = client.get("/api/admin/users").json()["users"]
    assert [(user["userId"], user["plan"]) for user in users] == [("user-1", "Free")]

    assert client.post("/api/admin/user/user-1/plan", json={"plan": "Gold"}).status_code == 400
    assert client.post("/api/admin/user/ghost/plan", json={"plan": "Premium"}).status_code == 404
    upgraded = client.post("/api/admin/user/user-1/plan", json={"plan": "Premium"})
    assert upgraded.status_code == 200
    assert upgraded.json()["user"]["plan"] == "Premium"

    _create()


def test_erase_account_cascades():
    _create("user-1")
    _create("user-1")
    _create("user-2")
    client.post("/api/admin/user/user-1/plan", json={"plan": "Premium"})
    client.post("/api/mocks/schedule", json={"scheduledFor": _future()}, headers={"X-User-Id": "user-1"})

    erased = client.delete("/api/admin/user/user-1")
    assert erased.status_code == 200
    assert erased.json()["deleted"] == {"sessions": 2, "scheduledMocks": 1}
    assert client.get("/api/interview/all", params={"userId": "user-1"}).json()["interviews"] == []
    assert len(client.get("/api/interview/all", params={"userId": "user-2"}).json()["interviews"]) == 1
    assert client.delete("/api/admin/user/user-1").status_code == 404


def test_schedule_mock_requires_premium():
    body = {"scheduledFor": _future(), "jobRole": "Analyst"}
    assert client.post("/api/mocks/schedule", json=body).status_code == 401
    assert client.post("/api/mocks/schedule", json=body, headers={"X-User-Id": "ghost"}).status_code == 404

    _create("user-1")
    assert client.post("/api/mocks/schedule", json=body, headers={"X-User-Id": "user-1"}).status_code == 403

    client.post("/api/admin/user/user-1/plan", json={"plan": "Premium"})
    scheduled = client.post("/api/mocks/schedule", json=body, headers={"X-User-Id": "user-1"})
    assert scheduled.status_code == 201
    mock = scheduled.json()["mock"]
    assert mock["reminderStage"] == "unset"
    assert mock["email"] == "user-1@example.com"

    past = {"scheduledFor": (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()}
    assert client.post("/api/mocks/schedule", json=past, headers={"X-User-Id": "user-1"}).status_code == 400

    listed = client.get("/api/mocks", params={"userId": "user-1"}).json()["mocks"]
    assert [item["id"] for item in listed] == [mock["id"]]


def test_reminder_sweep_advances_due_mocks():
    _create("user-1")
    client.post("/api/admin/user/user-1/plan", json={"plan": "Premium"})
    soon = (datetime.now(timezone.utc) + timedelta(minutes=50)).isoformat()
    client.post("/api/mocks/schedule", json={"scheduledFor": soon}, headers={"X-User-Id": "user-1"})
    client.post("/api/mocks/schedule", json={"scheduledFor": _future(days=3)}, headers={"X-User-Id": "user-1"})

    swept = client.post("/api/admin/reminders/sweep")
    assert swept.status_code == 200
    reminders = swept.json()["reminders"]
    assert [item["stage"] for item in reminders] == ["1h"]
    assert reminders[0]["mock"]["reminderStage"] == "1h"

    assert client.post("/api/admin/reminders/sweep").json()["reminders"] == []
