"""FastAPI application exposing the interview workflow over HTTP."""

from __future__ import annotations

from typing import Any

import pendulum
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from . import __version__
from .container import InterviewContainer, create_container
from .errors import InterviewGateError
from .schemas import ApplicationTarget, CandidateInfo, VerificationResult
from .workflow import InterviewWorkflow

SERVICE_NAME = "AI Interview Validation System"


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AnalyzeRequest(_Request):
    resume: dict[str, Any]


class LoadResumeRequest(_Request):
    resume_path: str = Field(alias="resumePath", min_length=1)


class GenerateQuestionsRequest(_Request):
    skills: list[str]
    experience_level: str = Field(default="mid", alias="experienceLevel")
    session_id: str | None = Field(default=None, alias="sessionId")


class EvaluateAnswersRequest(_Request):
    questions: list[dict[str, Any]]
    answers: list[str]
    session_id: str = Field(alias="sessionId", min_length=1)


class LoadCatalogRequest(_Request):
    csv_path: str = Field(alias="csvPath", min_length=1)


class MatchRequest(_Request):
    candidate_skills: list[str] = Field(alias="candidateSkills")
    evaluation_result: dict[str, Any] | None = Field(default=None, alias="evaluationResult")
    session_id: str | None = Field(default=None, alias="sessionId")
    top_k: int = Field(default=5, alias="topK", ge=1)


class ApplyRequest(_Request):
    resume: dict[str, Any]
    matched_jobs: list[ApplicationTarget] = Field(alias="matchedJobs", min_length=1)
    candidate_info: CandidateInfo = Field(alias="candidateInfo")


def _verification_payload(result: VerificationResult) -> dict[str, Any]:
    return {
        "verification_status": result.status,
        "is_verified": result.is_verified,
        "average_score": result.average_score,
        "total_score": result.total_score,
        "passing_threshold": result.threshold,
        "summary": result.summary(),
        "detailed_results": [
            {
                "question_id": evaluation.question_id,
                "skill": evaluation.skill,
                "score": evaluation.score,
                "subscores": evaluation.subscores.model_dump(),
                "verdict": evaluation.verdict,
                "feedback": evaluation.feedback,
                "strengths": evaluation.strengths,
                "improvements": evaluation.improvements,
            }
            for evaluation in result.evaluations
        ],
    }


def create_app(container: InterviewContainer | None = None) -> FastAPI:
    """Build the FastAPI app around a container's workflow."""

    container = container or create_container()
    logger = structlog.get_logger(__name__)

    app = FastAPI(title=SERVICE_NAME, version=__version__)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def workflow() -> InterviewWorkflow:
        return container.workflow()

    @app.exception_handler(InterviewGateError)
    async def _gate_error(request: Request, exc: InterviewGateError) -> JSONResponse:
        log = logger.warning if exc.status_code < 500 else logger.error
        log("api.error", path=request.url.path, kind=exc.kind, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def _request_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {"loc": (), "msg": "invalid request"}
        field = ".".join(str(part) for part in first["loc"] if part != "body")
        message = f"{field}: {first['msg']}" if field else str(first["msg"])
        logger.warning("api.invalid_request", path=request.url.path, error=message)
        return JSONResponse(
            status_code=400,
            content={"success": False, "kind": "validation_error", "error": message},
        )

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": __version__,
            "timestamp": pendulum.now().to_iso8601_string(),
        }

    @app.post("/api/resume/analyze")
    def analyze_resume(body: AnalyzeRequest) -> dict[str, Any]:
        analysis = workflow().analyze(body.resume)
        return {"success": True, "analysis": analysis.to_payload()}

    @app.post("/api/resume/load")
    def load_resume(body: LoadResumeRequest) -> dict[str, Any]:
        resume, analysis = workflow().load_resume(body.resume_path)
        return {"success": True, "resume": resume, "analysis": analysis.to_payload()}

    @app.post("/api/questions/generate")
    def generate_questions(body: GenerateQuestionsRequest) -> dict[str, Any]:
        session_id, questions = workflow().generate_questions(
            body.skills, body.experience_level, session_id=body.session_id
        )
        return {
            "success": True,
            "sessionId": session_id,
            "questions": [question.public().model_dump() for question in questions],
            "metadata": {
                "total_questions": len(questions),
                "skills_assessed": list(dict.fromkeys(q.skill for q in questions)),
                "experience_level": body.experience_level,
            },
        }

    @app.post("/api/answers/evaluate")
    def evaluate_answers(body: EvaluateAnswersRequest) -> dict[str, Any]:
        result = workflow().evaluate_answers(body.session_id, body.questions, body.answers)
        return {"success": True, **_verification_payload(result)}

    @app.get("/api/answers/evaluation/{session_id}")
    def get_evaluation(session_id: str) -> dict[str, Any]:
        result = workflow().get_evaluation(session_id)
        return {"success": True, "evaluation": _verification_payload(result)}

    @app.post("/api/jobs/load-data")
    def load_jobs(body: LoadCatalogRequest) -> dict[str, Any]:
        count = workflow().load_catalog(body.csv_path)
        return {"success": True, "message": f"Loaded {count} jobs", "jobs_count": count}

    @app.get("/api/jobs/all")
    def all_jobs() -> dict[str, Any]:
        jobs = workflow().list_jobs()
        return {
            "success": True,
            "jobs": [job.model_dump(mode="json") for job in jobs],
            "total_jobs": len(jobs),
        }

    @app.get("/api/jobs/{job_id}")
    def job_by_id(job_id: int) -> dict[str, Any]:
        job = workflow().get_job(job_id)
        return {"success": True, "job": job.model_dump(mode="json")}

    @app.post("/api/jobs/match")
    def match_jobs(body: MatchRequest) -> dict[str, Any]:
        outcome = workflow().match_jobs(
            body.candidate_skills,
            session_id=body.session_id,
            verification=body.evaluation_result,
            top_k=body.top_k,
        )
        return {"success": True, **outcome.to_dict()}

    @app.post("/api/jobs/apply")
    def apply(body: ApplyRequest) -> dict[str, Any]:
        report = workflow().apply(body.resume, body.matched_jobs, body.candidate_info)
        summary = report.summary()
        return {
            "success": True,
            "message": f"Applications sent: {summary['total_sent']}, Failed: {summary['total_failed']}",
            "applications": [record.model_dump() for record in report.records],
            "summary": summary,
        }

    return app
