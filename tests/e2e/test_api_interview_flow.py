from __future__ import annotations

import csv
import io

import pytest
from fastapi.testclient import TestClient

import api.deps
from api_server import app
from llm_gateway import GatewayTimeout, LlmGatewayError

client = TestClient(app)

QUESTIONS = [
    "Describe a backend system you designed.",
    "How do you handle database migrations?",
    "Tell me about a production incident.",
    "How do you test asynchronous code?",
    "What does good API design mean to you?",
]


@pytest.fixture(autouse=True)
def fake_generators(monkeypatch):
    monkeypatch.setattr(api.deps, "generate_questions", lambda request: list(QUESTIONS))
    monkeypatch.setattr(
        api.deps,
        "generate_ideal_answer",
        lambda question, *, job_role="", experience="": f"Ideal answer for {question}",
    )


def _create(user="user-1", **overrides):
    body = {"jobRole": "Backend Engineer", "experience": "3 years", "email": f"{user}@example.com"}
    body.update(overrides)
    return client.post("/api/interview/create", json=body, headers={"X-User-Id": user})


def test_full_text_interview_flow():
    created = _create()
    assert created.status_code == 201
    interview = created.json()["interview"]
    assert interview["status"] == "created"
    assert interview["jobRole"] == "Backend Engineer"
    assert interview["userId"] == "user-1"

    started = client.post("/api/interview/start", json={"interviewId": interview["id"]})
    assert started.status_code == 200
    assert started.json()["questions"] == QUESTIONS

    answers = ["", "a" * 15, "b" * 45, "c" * 90, "d" * 150]
    submitted = client.post("/api/interview/submit", json={"interviewId": interview["id"], "answers": answers})
    assert submitted.status_code == 200
    body = submitted.json()
    assert body["score"] == 63
    assert body["feedback"][0] == "Poor: no answer"
    assert body["idealAnswers"][0] == f"Ideal answer for {QUESTIONS[0]}"
    assert body["overallFeedback"].startswith("Good effort.")

    fetched = client.get(f"/api/interview/{interview['id']}").json()["interview"]
    assert fetched["status"] == "completed"
    assert fetched["score"] == 63
    assert fetched["answers"] == answers


def test_header_identity_wins_over_body():
    created = _create(userId="someone-else")
    assert created.json()["interview"]["userId"] == "user-1"


def test_create_validation_errors():
    missing_role = client.post(
        "/api/interview/create", json={"experience": "3 years"}, headers={"X-User-Id": "user-1"}
    )
    assert missing_role.status_code == 400
    assert missing_role.json()["detail"] == "Job role and experience are required"

    no_identity = client.post("/api/interview/create", json={"jobRole": "QA", "experience": "1 year"})
    assert no_identity.status_code == 400

    bad_mode = _create(mode="hologram")
    assert bad_mode.status_code == 400


def test_fourth_free_interview_is_forbidden():
    for _ in range(3):
        assert _create().status_code == 201
    blocked = _create()
    assert blocked.status_code == 403
    assert "3 mock interviews per month" in blocked.json()["detail"]


def test_start_errors():
    assert client.post("/api/interview/start", json={"interviewId": "missing"}).status_code == 404

    interview_id = _create().json()["interview"]["id"]
    client.post("/api/interview/start", json={"interviewId": interview_id})
    client.post("/api/interview/submit", json={"interviewId": interview_id, "answers": ["done"] * 5})
    assert client.post("/api/interview/start", json={"interviewId": interview_id}).status_code == 409


@pytest.mark.parametrize("error, status", [(LlmGatewayError("down"), 500), (GatewayTimeout("slow"), 504)])
def test_generation_failures_leave_session_retryable(monkeypatch, error, status):
    def failing(request):
        raise error

    monkeypatch.setattr(api.deps, "generate_questions", failing)
    interview_id = _create().json()["interview"]["id"]
    assert client.post("/api/interview/start", json={"interviewId": interview_id}).status_code == status
    assert client.get(f"/api/interview/{interview_id}").json()["interview"]["status"] == "created"


def test_submit_errors():
    interview_id = _create().json()["interview"]["id"]
    before_start = client.post("/api/interview/submit", json={"interviewId": interview_id, "answers": ["x"]})
    assert before_start.status_code == 500

    client.post("/api/interview/start", json={"interviewId": interview_id})
    not_a_list = client.post("/api/interview/submit", json={"interviewId": interview_id, "answers": "x"})
    assert not_a_list.status_code == 400
    missing = client.post("/api/interview/submit", json={"interviewId": interview_id})
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Answers must be an array"
    unknown = client.post("/api/interview/submit", json={"interviewId": "missing", "answers": []})
    assert unknown.status_code == 404


def test_video_submission_has_no_score():
    interview_id = _create(mode="video").json()["interview"]["id"]
    client.post("/api/interview/start", json={"interviewId": interview_id})
    body = client.post(
        "/api/interview/submit",
        json={"interviewId": interview_id, "answers": [{"url": "https://cdn/q1.webm", "mimetype": "video/webm"}]},
    ).json()
    assert body["score"] is None
    assert body["feedback"][0].startswith("Good")
    assert body["feedback"][1].startswith("Poor")


def test_list_by_query_or_header():
    _create(user="user-1")
    _create(user="user-2")
    by_query = client.get("/api/interview/all", params={"userId": "user-1"}).json()["interviews"]
    assert [item["userId"] for item in by_query] == ["user-1"]
    by_header = client.get("/api/interview/all", headers={"X-User-Id": "user-2"}).json()["interviews"]
    assert [item["userId"] for item in by_header] == ["user-2"]
    assert len(client.get("/api/interview/all").json()["interviews"]) == 2


def test_get_unknown_interview_is_404():
    assert client.get("/api/interview/does-not-exist").status_code == 404


def test_export_logs_as_csv():
    assert client.get("/api/interview/export/logs").status_code == 404

    _create(jobRole='Engineer, "Platform"')
    resp = client.get("/api/interview/export/logs")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "attachment" in resp.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(resp.text)))
    assert rows[0][0] == "InterviewID"
    assert rows[1][3] == 'Engineer, "Platform"'


def test_health():
    assert client.get("/").status_code == 200


def test_upload_video_answers_are_scored_on_submit():
    interview_id = _create(mode="video").json()["interview"]["id"]
    client.post("/api/interview/start", json={"interviewId": interview_id})

    uploaded = client.post(
        "/api/interview/upload-video",
        data={"interviewId": interview_id, "questionIndex": "1"},
        files={"video": ("answer.webm", b"fake-video-bytes", "video/webm")},
    )
    assert uploaded.status_code == 200
    assert uploaded.json()["message"] == "Video uploaded and saved."

    stored = client.get(f"/api/interview/{interview_id}").json()["interview"]["answers"]
    assert stored[0] is None
    assert stored[1] == {"url": f"/media/{interview_id}-q1.webm", "mimetype": "video/webm"}

    body = client.post("/api/interview/submit", json={"interviewId": interview_id, "answers": []}).json()
    assert body["score"] is None
    assert body["feedback"][0].startswith("Poor")
    assert body["feedback"][1].startswith("Good")


def test_upload_video_errors():
    interview_id = _create(mode="video").json()["interview"]["id"]
    video = {"video": ("answer.webm", b"bytes", "video/webm")}

    no_file = client.post("/api/interview/upload-video", data={"interviewId": interview_id, "questionIndex": "0"})
    assert no_file.status_code == 400
    assert no_file.json()["detail"] == "No video file uploaded."

    unknown = client.post(
        "/api/interview/upload-video", data={"interviewId": "missing", "questionIndex": "0"}, files=video
    )
    assert unknown.status_code == 404

    out_of_range = client.post(
        "/api/interview/upload-video", data={"interviewId": interview_id, "questionIndex": "9"}, files=video
    )
    assert out_of_range.status_code == 400
