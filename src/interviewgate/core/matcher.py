"""Skill containment matcher ranking catalog jobs for a verified candidate."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import structlog

from ..errors import CatalogEmptyError, ValidationError
from ..schemas import JobPosting, VerificationResult
from .catalog import JobCatalog

VERIFICATION_FAILED = "verification_failed"
MIN_MATCH_SCORE = 40.0
DEFAULT_TOP_K = 5


@dataclass(slots=True)
class MatchedJob:
    """Job paired with its score for one match request."""

    job: JobPosting
    match_score: float
    matched_skills: list[str]

    def to_dict(self) -> dict[str, Any]:
        payload = self.job.model_dump(mode="json")
        payload["match_score"] = round(self.match_score, 2)
        payload["matched_skills"] = list(self.matched_skills)
        payload["application_status"] = "pending"
        return payload


@dataclass(slots=True)
class MatchOutcome:
    """Ranked slice of eligible jobs plus the full eligible count."""

    matched_jobs: list[MatchedJob] = field(default_factory=list)
    total_matches: int = 0
    reason: str | None = None
    message: str | None = None
    candidate_score: int | None = None

    @property
    def verification_status(self) -> str:
        return "NOT_VERIFIED" if self.reason == VERIFICATION_FAILED else "VERIFIED"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "matched_jobs": [match.to_dict() for match in self.matched_jobs],
            "total_matches": self.total_matches,
            "candidate_score": self.candidate_score,
            "verification_status": self.verification_status,
        }
        if self.reason:
            payload["reason"] = self.reason
        if self.message:
            payload["message"] = self.message
        return payload


def skills_overlap(required: str, candidate_skills: Sequence[str]) -> bool:
    """Bidirectional case-folded substring containment.

    ``"java"`` satisfies ``"JavaScript"`` and ``"react native"`` satisfies
    ``"React"``.
    """
    required_folded = required.casefold()
    return any(
        skill in required_folded or required_folded in skill for skill in candidate_skills
    )


def score_job(job: JobPosting, folded_skills: Sequence[str]) -> tuple[float, list[str]]:
    """Return the coverage score and the job's satisfied skills in job order."""
    if not job.required_skills:
        return 0.0, []
    matched = [req for req in job.required_skills if skills_overlap(req, folded_skills)]
    return len(matched) / len(job.required_skills) * 100, matched


class JobMatcher:
    """Score, filter and rank catalog jobs for a verified candidate."""

    def __init__(self, catalog: JobCatalog, *, min_score: float = MIN_MATCH_SCORE) -> None:
        self._catalog = catalog
        self._min_score = min_score
        self._logger = structlog.get_logger(__name__)

    def match(
        self,
        candidate_skills: Sequence[str],
        verification: VerificationResult,
        top_k: int = DEFAULT_TOP_K,
    ) -> MatchOutcome:
        if not verification.is_verified:
            self._logger.info(
                "match.rejected",
                reason=VERIFICATION_FAILED,
                average_score=verification.average_score,
            )
            return MatchOutcome(
                reason=VERIFICATION_FAILED,
                message="Candidate not verified. No job applications sent.",
                candidate_score=verification.average_score,
            )
        if top_k < 1:
            raise ValidationError("topK must be a positive integer")

        snapshot = self._catalog.snapshot()
        if not snapshot.jobs:
            raise CatalogEmptyError("No jobs loaded. Load the job catalog first.")

        folded = [skill.strip().casefold() for skill in candidate_skills if skill and skill.strip()]

        eligible: list[MatchedJob] = []
        for job in snapshot.jobs:
            score, matched = score_job(job, folded)
            if matched and score >= self._min_score:
                eligible.append(MatchedJob(job=job, match_score=score, matched_skills=matched))

        # sorted() is stable, so equal scores keep catalog order
        ranked = sorted(eligible, key=lambda item: item.match_score, reverse=True)
        self._logger.info(
            "match.completed",
            catalog_size=len(snapshot),
            total_matches=len(ranked),
            top_k=top_k,
        )
        return MatchOutcome(
            matched_jobs=ranked[:top_k],
            total_matches=len(ranked),
            candidate_score=verification.average_score,
        )
