# /tests/test_api.py

import json

import pytest
from fastapi.testclient import TestClient

from app.db.database import get_db
from app.main import app

VALID_SCORE_REPLY = json.dumps({
    "score": 62,
    "strengths": ["Clear thesis"],
    "improvements": [],
    "detailed_feedback": "Well argued.",
    "recommendations": [],
    "overall_comments": "Good work.",
})


@pytest.fixture
def client(db_session):
    """A TestClient whose requests all share the test database session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def assignment_id(client):
    response = client.post("/api/assignments", json={"title": "Essay 1", "max_score": 70})
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def submission_id(client, assignment_id):
    response = client.post(
        f"/api/assignments/{assignment_id}/submissions",
        data={"student_name": "Jane Doe"},
        files={"file": ("essay.txt", b"An essay about trade routes.", "text/plain")},
    )
    assert response.status_code == 201
    return response.json()["id"]


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "running" in response.json()["status"]


# --- Assignments and submissions ---

def test_create_assignment_rejects_blank_title(client):
    assert client.post("/api/assignments", json={"title": "   "}).status_code == 422


def test_submit_and_list(client, assignment_id, submission_id):
    submission = client.get(f"/api/submissions/{submission_id}").json()
    assert submission["status"] == "submitted"
    assert submission["file_name"] == "essay.txt"
    assert submission["file_type"] == "text/plain"

    listed = client.get(f"/api/assignments/{assignment_id}/submissions").json()
    assert [s["id"] for s in listed] == [submission_id]

    summaries = client.get("/api/assignments").json()["assignments"]
    assert summaries[0]["progress"] == {"total": 1, "graded": 0, "ungraded": 1}


def test_submit_with_blank_name_is_rejected(client, assignment_id):
    response = client.post(
        f"/api/assignments/{assignment_id}/submissions",
        data={"student_name": "  "},
        files={"file": ("essay.txt", b"text", "text/plain")},
    )
    assert response.status_code == 422
    assert response.json()["detail"] == "Please enter the student's name."


def test_unknown_assignment_returns_404(client):
    assert client.get("/api/assignments/asg_missing").status_code == 404


# --- Evaluation flow ---

def test_ai_evaluation_then_publish(client, submission_id, mock_generate_text):
    mock_generate_text.return_value = VALID_SCORE_REPLY

    response = client.post(f"/api/submissions/{submission_id}/evaluate", json={"assignment_title": "Essay 1"})
    assert response.status_code == 200
    body = response.json()
    assert body["evaluation"]["score"] == 62
    evaluation_id = body["evaluationId"]

    assert client.get(f"/api/submissions/{submission_id}").json()["status"] == "graded"
    assert client.get(f"/api/submissions/{submission_id}/current-evaluation?published_only=true").json() is None

    for _ in range(2):
        published = client.post(f"/api/evaluations/{evaluation_id}/publish")
        assert published.status_code == 200
        assert published.json()["is_published"] is True

    current = client.get(f"/api/submissions/{submission_id}/current-evaluation?published_only=true").json()
    assert current["id"] == evaluation_id

    # A graded submission cannot be evaluated again
    assert client.post(f"/api/submissions/{submission_id}/evaluate").status_code == 409


def test_ai_evaluation_failure_is_reported(client, submission_id, mock_generate_text):
    from app.core.exceptions import UpstreamError
    mock_generate_text.side_effect = UpstreamError("AI model request failed: quota")

    response = client.post(f"/api/submissions/{submission_id}/evaluate")

    assert response.status_code == 502
    assert client.get(f"/api/submissions/{submission_id}").json()["status"] == "evaluation_failed"


def test_manual_evaluation_grades_submission(client, submission_id):
    response = client.post(
        f"/api/submissions/{submission_id}/manual-evaluation",
        json={"score": 65, "remarks": "Good work"},
    )
    assert response.status_code == 201
    assert response.json()["max_score"] == 70
    assert client.get(f"/api/submissions/{submission_id}").json()["status"] == "graded"
    assert len(client.get(f"/api/evaluations?submission_id={submission_id}").json()) == 1


def test_manual_evaluation_out_of_range(client, submission_id):
    response = client.post(
        f"/api/submissions/{submission_id}/manual-evaluation",
        json={"score": 80, "max_score": 70, "remarks": "Good work"},
    )
    assert response.status_code == 422
    assert client.get(f"/api/submissions/{submission_id}").json()["status"] == "submitted"


def test_manual_evaluation_rejects_nan(client, submission_id):
    response = client.post(
        f"/api/submissions/{submission_id}/manual-evaluation",
        content='{"score": NaN, "remarks": "Good work"}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 422
    assert client.get(f"/api/submissions/{submission_id}/evaluations").json() == []


def test_publish_unknown_evaluation(client):
    assert client.post("/api/evaluations/eval_missing/publish").status_code == 404


# --- Function-style envelopes ---

def test_extract_text_envelope(client, submission_id):
    file_url = client.get(f"/api/submissions/{submission_id}").json()["file_path"]
    response = client.post("/api/functions/extract-text", json={"fileUrl": file_url, "fileType": "text/plain"})
    assert response.status_code == 200
    assert response.json() == {
        "success": True, "extractedText": "An essay about trade routes.", "fileType": "text/plain", "error": None
    }


def test_extract_text_envelope_reports_unsupported_format(client):
    response = client.post(
        "/api/functions/extract-text",
        json={"fileUrl": "https://cdn.example.com/a.doc", "fileType": "application/msword"},
    )
    assert response.status_code == 415
    assert response.json()["success"] is False
    assert "not supported" in response.json()["error"]


def test_evaluate_assignment_envelope(client, submission_id, mock_generate_text):
    mock_generate_text.return_value = "not json"
    response = client.post(
        "/api/functions/evaluate-assignment",
        json={"submissionId": submission_id, "assignmentTitle": "Essay 1", "extractedText": "Some text"},
    )
    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["evaluation"]["score"] == 49
    assert body["evaluation"]["is_fallback"] is True


def test_evaluate_assignment_envelope_unknown_submission(client, mock_generate_text):
    response = client.post(
        "/api/functions/evaluate-assignment",
        json={"submissionId": "sub_missing", "extractedText": "Some text"},
    )
    assert response.status_code == 404
    assert response.json()["success"] is False


def test_generate_assessment_envelope(client, mock_generate_text):
    mock_generate_text.return_value = "garbage"
    response = client.post("/api/functions/generate-assessment", json={"topic": "Optics", "totalQuestions": 2})
    body = response.json()
    assert body["success"] is True
    assert body["assessment"]["is_fallback"] is True
    assert len(body["assessment"]["questions"]) == 2


def test_generate_assessment_envelope_validation(client, mock_generate_text):
    response = client.post("/api/functions/generate-assessment", json={"topic": "", "totalQuestions": 2})
    assert response.status_code == 422
    assert response.json()["success"] is False
    mock_generate_text.assert_not_called()


# --- Assessments and signatures ---

def test_publish_generated_assessment_creates_assignment(client, mock_generate_text):
    mock_generate_text.return_value = "garbage"
    assessment = client.post("/api/assessments/generate", json={"topic": "Optics", "totalQuestions": 3}).json()

    response = client.post("/api/assessments/publish", json={"assessment": assessment, "topic": "Optics"})

    assert response.status_code == 201
    assignment = response.json()
    assert assignment["max_score"] == 30
    template = client.get(f"/api/assessments/templates/{assignment['template_id']}").json()
    assert template["is_published"] is True
    assert len(template["questions"]) == 3


def test_save_and_promote_template(client, mock_generate_text):
    mock_generate_text.return_value = "garbage"
    assessment = client.post("/api/assessments/generate", json={"topic": "Optics", "totalQuestions": 1}).json()

    template = client.post("/api/assessments/templates", json={"assessment": assessment}).json()
    assert [t["id"] for t in client.get("/api/assessments/templates").json()["templates"]] == [template["id"]]

    promoted = client.post(f"/api/assessments/templates/{template['id']}/promote")
    assert promoted.status_code == 201
    assert promoted.json()["max_score"] == 10

    repeated = client.post(f"/api/assessments/templates/{template['id']}/promote")
    assert repeated.status_code == 409
    assert len(client.get("/api/assignments").json()["assignments"]) == 1


def test_signature_upload(client):
    response = client.post("/api/signatures", files={"file": ("sig.png", b"\x89PNG data", "image/png")})
    assert response.status_code == 201
    body = response.json()
    assert body["path"].startswith("signatures/signature-")
    assert body["url"] == f"http://testserver/files/signatures/{body['path']}"


def test_signature_upload_rejects_other_types(client):
    response = client.post("/api/signatures", files={"file": ("sig.gif", b"GIF89a", "image/gif")})
    assert response.status_code == 422


def test_extract_text_envelope_reports_malformed_url(client):
    response = client.post("/api/functions/extract-text", json={"fileUrl": "http://[bad-host/x.txt"})
    assert response.status_code == 502
    assert response.json()["success"] is False
