"""Skill and experience-tier extraction from structured resumes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import pydantic
import structlog

from ..errors import ValidationError
from ..schemas import CandidateInfo, CandidateProfile, ExperienceTier, SkillProfile

KNOWN_TECHNOLOGIES: tuple[str, ...] = (
    "JavaScript", "Python", "Java", "C++", "C#", "PHP", "Ruby", "Go", "Rust",
    "React", "Angular", "Vue", "Node.js", "Express", "Django", "Flask",
    "MongoDB", "PostgreSQL", "MySQL", "Redis", "Elasticsearch",
    "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Jenkins",
    "Git", "REST", "GraphQL", "SQL", "HTML", "CSS", "Sass",
)  # fmt: skip

ROLE_KEYWORDS: tuple[str, ...] = (
    "developer", "engineer", "analyst", "architect", "manager",
    "designer", "data scientist", "devops", "qa", "lead", "director",
)  # fmt: skip


@dataclass
class SkillExtractorConfig:
    """Heuristics used when deriving skills and tiers.

    ``years_per_entry`` is a coarse estimate: every experience
    entry counts as one and a half years regardless of its stated duration.
    """

    vocabulary: tuple[str, ...] = KNOWN_TECHNOLOGIES
    role_keywords: tuple[str, ...] = ROLE_KEYWORDS
    years_per_entry: float = 1.5
    mid_threshold_years: float = 3.0
    senior_threshold_years: float = 7.0


class SkillExtractor:
    """Derive normalized skills, experience tier and roles from a profile."""

    def __init__(self, *, config: SkillExtractorConfig | None = None) -> None:
        self._config = config or SkillExtractorConfig()
        self._logger = structlog.get_logger(__name__)

    def parse_profile(self, payload: Any) -> CandidateProfile:
        if isinstance(payload, CandidateProfile):
            profile = payload
        else:
            if not isinstance(payload, Mapping):
                raise ValidationError("resume must be a JSON object")
            try:
                profile = CandidateProfile.model_validate(dict(payload))
            except pydantic.ValidationError as exc:
                raise ValidationError(f"Invalid resume structure: {exc.errors()[0]['msg']}") from exc
        if profile.personal_info is None and profile.skills is None:
            raise ValidationError(
                "Invalid resume structure: personal_info or skills block is required"
            )
        return profile

    def extract(self, payload: Any) -> SkillProfile:
        profile = self.parse_profile(payload)
        declared = profile.skills

        technical: list[str] = list(declared.technical) if declared else []
        soft = list(declared.soft) if declared else []
        languages = list(declared.languages) if declared else []

        for experience in profile.experience:
            technical.extend(self.mine_text(" ".join(experience.description)))
        for project in profile.projects:
            technical.extend(project.technologies)
            technical.extend(self.mine_text(project.description))

        result = SkillProfile(
            technical=_unique(technical),
            soft=_unique(soft),
            languages=_unique(languages),
            experience_tier=self.experience_tier(len(profile.experience)),
            job_roles=self.job_roles(profile),
            candidate_info=self.candidate_info(profile),
        )
        self._logger.info(
            "profile.analyzed",
            technical=len(result.technical),
            soft=len(result.soft),
            languages=len(result.languages),
            experience_tier=result.experience_tier,
        )
        return result

    def mine_text(self, text: str) -> list[str]:
        """Return vocabulary entries occurring in ``text``, case-insensitively.

        Plain substring matching: short names such as "Go" also hit words
        like "good".
        """
        if not text:
            return []
        lowered = text.lower()
        return [tech for tech in self._config.vocabulary if tech.lower() in lowered]

    def experience_tier(self, entry_count: int) -> ExperienceTier:
        years = entry_count * self._config.years_per_entry
        if years >= self._config.senior_threshold_years:
            return "senior"
        if years >= self._config.mid_threshold_years:
            return "mid"
        return "junior"

    def job_roles(self, profile: CandidateProfile) -> list[str]:
        roles = [exp.title.lower() for exp in profile.experience if exp.title]
        summary = profile.summary.lower()
        if summary:
            roles.extend(kw for kw in self._config.role_keywords if kw in summary)
        return _unique(roles)

    @staticmethod
    def candidate_info(profile: CandidateProfile) -> CandidateInfo:
        info = profile.personal_info
        if info is None:
            return CandidateInfo()
        return CandidateInfo(
            name=info.name or "Unknown",
            email=info.email or "",
            phone=info.phone or "",
            location=info.location or "",
            linkedin=info.linkedin or "",
            github=info.github or "",
        )


def _unique(values: Iterable[str]) -> list[str]:
    """Exact-string dedup keeping first-seen order; blank entries dropped."""
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if not value or not value.strip() or value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered
