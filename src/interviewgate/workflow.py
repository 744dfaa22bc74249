"""Interview workflow assembly and execution."""

from __future__ import annotations

import json
import threading
import uuid
from pathlib import Path
from typing import Any, Mapping, Sequence

import pendulum
import pydantic
import structlog

from .core import (
    ApplicationDispatcher,
    JobCatalog,
    JobMatcher,
    MatchOutcome,
    QuestionGenerator,
    SessionCache,
    SkillExtractor,
    VerificationAggregator,
)
from .errors import NotFoundError, ShapeMismatchError, ValidationError
from .mail import render_resume
from .schemas import (
    ApplicationTarget,
    CandidateInfo,
    DispatchReport,
    JobPosting,
    Question,
    SkillProfile,
    VerificationResult,
)


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def append(self, record: dict) -> None:
        entry = {"logged_at": pendulum.now().to_iso8601_string(), **record}
        with self._lock, self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(entry, ensure_ascii=False))
            handle.write("\n")


class InterviewWorkflow:
    """End-to-end orchestrator from resume analysis to job applications."""

    def __init__(
        self,
        *,
        extractor: SkillExtractor,
        question_generator: QuestionGenerator,
        aggregator: VerificationAggregator,
        catalog: JobCatalog,
        matcher: JobMatcher,
        dispatcher: ApplicationDispatcher,
        question_store: SessionCache[list[Question]],
        verification_cache: SessionCache[VerificationResult],
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._extractor = extractor
        self._questions = question_generator
        self._aggregator = aggregator
        self._catalog = catalog
        self._matcher = matcher
        self._dispatcher = dispatcher
        self._question_store = question_store
        self._verifications = verification_cache
        self._audit = audit_logger
        self._logger = structlog.get_logger(__name__)

    @property
    def catalog(self) -> JobCatalog:
        return self._catalog

    def analyze(self, resume: Any) -> SkillProfile:
        return self._extractor.extract(resume)

    def load_resume(self, path: str | Path) -> tuple[dict[str, Any], SkillProfile]:
        path = Path(path)
        if not path.is_file():
            raise ValidationError(f"Resume file not found: {path}")
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValidationError(f"Invalid resume JSON: {exc}") from exc
        return data, self.analyze(data)

    def generate_questions(
        self,
        skills: Sequence[str],
        experience_level: str = "mid",
        *,
        session_id: str | None = None,
    ) -> tuple[str, list[Question]]:
        questions = self._questions.generate(skills, experience_level)
        session_id = session_id or uuid.uuid4().hex
        self._question_store.set(session_id, questions)
        self._logger.info(
            "questions.generated",
            session_id=session_id,
            count=len(questions),
            experience_level=experience_level,
        )
        return session_id, questions

    def evaluate_answers(
        self,
        session_id: str,
        questions: Sequence[Mapping[str, Any]],
        answers: Sequence[str],
    ) -> VerificationResult:
        if len(questions) != len(answers):
            raise ShapeMismatchError("Number of questions must match number of answers")
        resolved = self._resolve_questions(session_id, questions)
        result = self._aggregator.evaluate(resolved, answers)
        self._verifications.set(session_id, result)
        if self._audit:
            self._audit.append(
                {
                    "event": "verification",
                    "session_id": session_id,
                    "average_score": result.average_score,
                    "passed_count": result.passed_count,
                    "is_verified": result.is_verified,
                }
            )
        return result

    def get_evaluation(self, session_id: str) -> VerificationResult:
        result = self._verifications.get(session_id)
        if result is None:
            raise NotFoundError("Evaluation result not found")
        return result

    def load_catalog(self, source: str | Path) -> int:
        return self._catalog.load(source)

    def list_jobs(self) -> tuple[JobPosting, ...]:
        return self._catalog.all()

    def get_job(self, job_id: int) -> JobPosting:
        job = self._catalog.by_id(job_id)
        if job is None:
            raise NotFoundError(f"Job {job_id} not found")
        return job

    def match_jobs(
        self,
        candidate_skills: Sequence[str],
        *,
        session_id: str | None = None,
        verification: Mapping[str, Any] | VerificationResult | None = None,
        top_k: int = 5,
    ) -> MatchOutcome:
        result = self._resolve_verification(session_id, verification)
        return self._matcher.match(candidate_skills, result, top_k)

    def apply(
        self,
        resume: Any,
        targets: Sequence[ApplicationTarget],
        candidate: CandidateInfo,
    ) -> DispatchReport:
        if not targets:
            raise ValidationError("matchedJobs array is required and must not be empty")
        profile = self._extractor.parse_profile(resume)
        report = self._dispatcher.dispatch_all(targets, candidate, render_resume(profile))
        if self._audit:
            self._audit.append(
                {
                    "event": "dispatch",
                    "candidate": candidate.name,
                    "applications": [record.model_dump() for record in report.records],
                    **report.summary(),
                }
            )
        return report

    def _resolve_questions(
        self,
        session_id: str,
        requested: Sequence[Mapping[str, Any]],
    ) -> list[Question]:
        if not session_id:
            raise ValidationError("sessionId is required")
        stored = self._question_store.get(session_id)
        if stored is None:
            raise ValidationError(f"No interview questions found for session {session_id!r}")
        by_id = {question.id: question for question in stored}

        resolved: list[Question] = []
        for item in requested:
            question_id = item.get("id") if isinstance(item, Mapping) else None
            if not isinstance(question_id, int) or isinstance(question_id, bool):
                raise ValidationError("every question must carry its integer id")
            question = by_id.get(question_id)
            if question is None:
                raise ValidationError(f"Question {question_id} is not part of session {session_id!r}")
            if question in resolved:
                raise ValidationError(f"Question {question_id} was submitted twice")
            resolved.append(question)
        return resolved

    def _resolve_verification(
        self,
        session_id: str | None,
        verification: Mapping[str, Any] | VerificationResult | None,
    ) -> VerificationResult:
        if session_id:
            cached = self._verifications.get(session_id)
            if cached is None:
                raise NotFoundError(f"No evaluation result found for session {session_id!r}")
            return cached
        if isinstance(verification, VerificationResult):
            return verification
        if verification is None:
            raise ValidationError("evaluationResult or a verified sessionId is required")
        if not isinstance(verification, Mapping):
            raise ValidationError("evaluationResult must be a JSON object")
        try:
            # is_verified and threshold are recomputed, never read from input
            return VerificationResult.model_validate(dict(verification))
        except pydantic.ValidationError as exc:
            raise ValidationError(f"Invalid evaluationResult: {exc.errors()[0]['msg']}") from exc
