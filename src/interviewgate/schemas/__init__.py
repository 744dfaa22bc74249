"""Pydantic schema definitions shared across the interview gate."""

from __future__ import annotations

from .application import (
    ApplicationRecord,
    ApplicationStatus,
    ApplicationTarget,
    DispatchReport,
)
from .candidate import (
    CandidateInfo,
    CandidateProfile,
    DeclaredSkills,
    ExperienceEntry,
    ExperienceTier,
    PersonalInfo,
    ProjectEntry,
    SkillProfile,
)
from .interview import (
    PASSING_THRESHOLD,
    QUESTIONS_PER_SESSION,
    AnswerEvaluation,
    PublicQuestion,
    Question,
    SubScores,
    VerificationResult,
)
from .job import JobPosting, parse_skills

__all__ = [
    "ApplicationRecord",
    "ApplicationStatus",
    "ApplicationTarget",
    "DispatchReport",
    "CandidateInfo",
    "CandidateProfile",
    "DeclaredSkills",
    "ExperienceEntry",
    "ExperienceTier",
    "PersonalInfo",
    "ProjectEntry",
    "SkillProfile",
    "PASSING_THRESHOLD",
    "QUESTIONS_PER_SESSION",
    "AnswerEvaluation",
    "PublicQuestion",
    "Question",
    "SubScores",
    "VerificationResult",
    "JobPosting",
    "parse_skills",
]
