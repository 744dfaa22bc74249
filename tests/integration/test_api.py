from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from interviewgate.api import create_app
from interviewgate.container import create_container
from interviewgate.errors import DispatchError
from interviewgate.mail import ApplicationLetter


class StubQuestionOracle:
    def generate_questions(self, skills, experience_level):
        return [
            {
                "id": index,
                "skill": skills[(index - 1) % len(skills)],
                "question": f"Explain topic {index}.",
                "correct_answer": f"Reference answer {index}.",
                "difficulty": "medium",
                "keywords": ["alpha", "beta"],
            }
            for index in range(1, 6)
        ]


class StubEvaluationOracle:
    def __init__(self, accuracy: int = 40) -> None:
        self.accuracy = accuracy
        self.references: list[str] = []

    def evaluate_answer(self, question, answer, reference_answer, keywords):
        self.references.append(reference_answer)
        return {
            "accuracy": self.accuracy,
            "completeness": 30,
            "clarity": 10,
            "keyword_score": 5,
            "feedback": "solid",
            "strengths": ["structure"],
            "improvements": None,
        }


class RecordingTransport:
    def __init__(self, reject: set[str] | None = None) -> None:
        self.letters: list[ApplicationLetter] = []
        self._reject = reject or set()

    def send(self, letter: ApplicationLetter) -> None:
        self.letters.append(letter)
        if letter.to in self._reject:
            raise DispatchError(f"Failed to send email to {letter.to}: mailbox unavailable")


def write_jobs(path: Path) -> Path:
    rows = [
        ("Acme", "Backend Engineer", "Python, Django", "jobs@acme.example"),
        ("Globex", "Data Engineer", "Python, SQL, Spark", "jobs@globex.example"),
        ("Initech", "Frontend Engineer", "TypeScript, React", "jobs@initech.example"),
    ]
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(["company_name", "job_role", "required_skills", "company_email", "location"])
        for company, role, skills, email in rows:
            writer.writerow([company, role, skills, email, "Remote"])
    return path


@pytest.fixture()
def harness(tmp_path: Path) -> dict[str, Any]:
    container = create_container(
        settings={"dispatch": {"delay_seconds": 0}, "audit_log": str(tmp_path / "audit.jsonl")},
        use_environment=False,
    )
    evaluator = StubEvaluationOracle()
    transport = RecordingTransport(reject={"jobs@globex.example"})
    container.question_oracle.override(providers.Object(StubQuestionOracle()))
    container.evaluation_oracle.override(providers.Object(evaluator))
    container.mail_transport.override(providers.Object(transport))
    return {
        "client": TestClient(create_app(container)),
        "evaluator": evaluator,
        "transport": transport,
        "audit": tmp_path / "audit.jsonl",
        "jobs": write_jobs(tmp_path / "jobs.csv"),
    }


def start_session(client: TestClient) -> tuple[str, list[dict[str, Any]]]:
    response = client.post(
        "/api/questions/generate", json={"skills": ["Python", "SQL"], "experienceLevel": "mid"}
    )
    assert response.status_code == 200
    body = response.json()
    return body["sessionId"], body["questions"]


def test_health_reports_service():
    client = TestClient(create_app(create_container(use_environment=False)))

    body = client.get("/health").json()

    assert body["status"] == "ok"
    assert body["version"] == "0.1.0"


def test_analyze_resume_returns_skill_profile():
    client = TestClient(create_app(create_container(use_environment=False)))
    resume = {
        "personal_info": {"name": "Ada"},
        "skills": {"technical": ["Python"]},
        "experience": [{"title": "Data Scientist", "description": ["Deployed Flask services on AWS"]}],
    }

    response = client.post("/api/resume/analyze", json={"resume": resume})

    assert response.status_code == 200
    analysis = response.json()["analysis"]
    assert analysis["candidate_info"]["name"] == "Ada"
    assert {"Flask", "AWS"} <= set(analysis["skills"]["technical"])
    assert analysis["experience_level"] == "junior"
    assert analysis["job_roles"] == ["data scientist"]


def test_generated_questions_hide_reference_answers(harness):
    session_id, questions = start_session(harness["client"])

    assert session_id
    assert len(questions) == 5
    assert all("correct_answer" not in question for question in questions)
    assert [question["id"] for question in questions] == [1, 2, 3, 4, 5]


def test_full_flow_from_interview_to_applications(harness):
    client = harness["client"]
    session_id, questions = start_session(client)

    evaluated = client.post(
        "/api/answers/evaluate",
        json={"sessionId": session_id, "questions": questions, "answers": ["answer"] * 5},
    )
    assert evaluated.status_code == 200
    verdict = evaluated.json()
    assert verdict["average_score"] == 85
    assert verdict["is_verified"] is True
    assert verdict["verification_status"] == "VERIFIED"
    assert verdict["summary"]["passed_questions"] == 5
    assert verdict["detailed_results"][0]["improvements"] == []
    assert harness["evaluator"].references[0] == "Reference answer 1."

    stored = client.get(f"/api/answers/evaluation/{session_id}")
    assert stored.json()["evaluation"]["average_score"] == 85

    loaded = client.post("/api/jobs/load-data", json={"csvPath": str(harness["jobs"])})
    assert loaded.json()["jobs_count"] == 3

    matched = client.post(
        "/api/jobs/match", json={"candidateSkills": ["Python", "SQL"], "sessionId": session_id}
    )
    body = matched.json()
    assert [job["company_name"] for job in body["matched_jobs"]] == ["Globex", "Acme"]
    assert body["matched_jobs"][0]["match_score"] == pytest.approx(66.67)
    assert body["total_matches"] == 2
    assert body["candidate_score"] == 85

    applied = client.post(
        "/api/jobs/apply",
        json={
            "resume": {"personal_info": {"name": "Ada Lovelace"}, "skills": {"technical": ["Python"]}},
            "matchedJobs": body["matched_jobs"],
            "candidateInfo": {"name": "Ada Lovelace", "email": "ada@example.com"},
        },
    )
    assert applied.status_code == 200
    result = applied.json()
    assert result["summary"] == {"total_sent": 1, "total_failed": 1, "companies_applied": ["Acme"]}
    assert [item["status"] for item in result["applications"]] == ["failed", "sent"]
    assert harness["transport"].letters[0].attachment.filename == "Ada_Lovelace_Resume.txt"

    events = [json.loads(line)["event"] for line in harness["audit"].read_text().splitlines()]
    assert events == ["verification", "dispatch"]


def test_shape_mismatch_is_rejected_without_scoring(harness):
    client = harness["client"]
    session_id, questions = start_session(client)

    response = client.post(
        "/api/answers/evaluate",
        json={"sessionId": session_id, "questions": questions, "answers": ["only one"]},
    )

    assert response.status_code == 400
    assert response.json()["kind"] == "shape_mismatch"
    assert harness["evaluator"].references == []


def test_unknown_session_and_evaluation_are_reported(harness):
    client = harness["client"]

    evaluated = client.post(
        "/api/answers/evaluate",
        json={"sessionId": "nope", "questions": [{"id": 1}], "answers": ["a"]},
    )
    missing = client.get("/api/answers/evaluation/nope")

    assert evaluated.status_code == 400
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "kind": "not_found", "error": "Evaluation result not found"}


def test_failing_average_blocks_matching(harness):
    client = harness["client"]
    harness["evaluator"].accuracy = 10
    session_id, questions = start_session(client)
    client.post("/api/jobs/load-data", json={"csvPath": str(harness["jobs"])})

    verdict = client.post(
        "/api/answers/evaluate",
        json={"sessionId": session_id, "questions": questions, "answers": ["a"] * 5},
    ).json()
    matched = client.post(
        "/api/jobs/match", json={"candidateSkills": ["Python"], "sessionId": session_id}
    ).json()

    assert verdict["average_score"] == 55
    assert verdict["is_verified"] is False
    assert matched["matched_jobs"] == []
    assert matched["reason"] == "verification_failed"
    assert matched["verification_status"] == "NOT_VERIFIED"


def test_forged_client_verdict_is_recomputed(harness):
    client = harness["client"]
    client.post("/api/jobs/load-data", json={"csvPath": str(harness["jobs"])})

    matched = client.post(
        "/api/jobs/match",
        json={
            "candidateSkills": ["Python"],
            "evaluationResult": {"average_score": 50, "is_verified": True, "threshold": 10},
        },
    ).json()

    assert matched["reason"] == "verification_failed"


def test_matching_before_catalog_load_is_an_error(harness):
    response = harness["client"].post(
        "/api/jobs/match",
        json={"candidateSkills": ["Python"], "evaluationResult": {"average_score": 90}},
    )

    assert response.status_code == 500
    assert response.json()["kind"] == "catalog_empty"


def test_catalog_endpoints(harness):
    client = harness["client"]
    client.post("/api/jobs/load-data", json={"csvPath": str(harness["jobs"])})

    listing = client.get("/api/jobs/all").json()
    job = client.get("/api/jobs/3")
    missing = client.get("/api/jobs/42")
    bad_source = client.post("/api/jobs/load-data", json={"csvPath": "/does/not/exist.csv"})

    assert listing["total_jobs"] == 3
    assert listing["jobs"][0]["required_skills"] == ["Python", "Django"]
    assert job.json()["job"]["company_name"] == "Initech"
    assert missing.status_code == 404
    assert bad_source.json()["kind"] == "catalog_load_error"
    assert client.get("/api/jobs/all").json()["total_jobs"] == 3


def test_request_validation_errors_use_error_envelope(harness):
    client = harness["client"]

    missing_skills = client.post("/api/questions/generate", json={})
    empty_skills = client.post("/api/questions/generate", json={"skills": []})
    no_targets = client.post(
        "/api/jobs/apply", json={"resume": {}, "matchedJobs": [], "candidateInfo": {"name": "Ada"}}
    )

    assert missing_skills.status_code == 400
    assert missing_skills.json()["kind"] == "validation_error"
    assert empty_skills.status_code == 400
    assert no_targets.status_code == 400


def test_load_resume_from_path(tmp_path: Path):
    client = TestClient(create_app(create_container(use_environment=False)))
    resume_path = tmp_path / "resume.json"
    resume_path.write_text(
        json.dumps({"personal_info": {"name": "Ada"}, "skills": {"technical": ["Go"]}}), encoding="utf-8"
    )
    broken_path = tmp_path / "broken.json"
    broken_path.write_text("{not json", encoding="utf-8")

    loaded = client.post("/api/resume/load", json={"resumePath": str(resume_path)})
    missing = client.post("/api/resume/load", json={"resumePath": str(tmp_path / "nope.json")})
    broken = client.post("/api/resume/load", json={"resumePath": str(broken_path)})

    assert loaded.status_code == 200
    assert loaded.json()["resume"]["personal_info"]["name"] == "Ada"
    assert loaded.json()["analysis"]["skills"]["technical"] == ["Go"]
    assert missing.status_code == 400
    assert broken.status_code == 400


def test_unknown_session_does_not_fall_back_to_client_verdict(harness):
    client = harness["client"]
    client.post("/api/jobs/load-data", json={"csvPath": str(harness["jobs"])})

    response = client.post(
        "/api/jobs/match",
        json={
            "candidateSkills": ["Python"],
            "sessionId": "never-evaluated",
            "evaluationResult": {"average_score": 90},
        },
    )

    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


def test_forged_average_with_evaluations_is_rejected(harness):
    client = harness["client"]
    client.post("/api/jobs/load-data", json={"csvPath": str(harness["jobs"])})
    evaluation = {
        "question_id": 1,
        "skill": "Python",
        "score": 10,
        "subscores": {"accuracy": 10, "completeness": 0, "clarity": 0, "keywords": 0},
    }

    response = client.post(
        "/api/jobs/match",
        json={
            "candidateSkills": ["Python"],
            "evaluationResult": {"average_score": 95, "evaluations": [evaluation] * 5},
        },
    )

    assert response.status_code == 400
    assert response.json()["kind"] == "validation_error"
