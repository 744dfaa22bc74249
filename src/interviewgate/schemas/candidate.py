from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ExperienceTier = Literal["junior", "mid", "senior"]


def _string_list(value: object) -> object:
    """Coerce non-list containers to an empty list; drop non-string entries."""
    if value is None or not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


class PersonalInfo(BaseModel):
    """Identity block of a resume."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    github: str | None = None

    model_config = ConfigDict(extra="allow")


class DeclaredSkills(BaseModel):
    """Skills the candidate lists explicitly."""

    technical: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    @field_validator("technical", "soft", "languages", mode="before")
    @classmethod
    def _coerce_lists(cls, value: object) -> object:
        return _string_list(value)


class ExperienceEntry(BaseModel):
    """Employment history entry."""

    title: str = ""
    company: str = ""
    duration: str | None = None
    description: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    @field_validator("description", mode="before")
    @classmethod
    def _split_description(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        return _string_list(value)

    @field_validator("title", "company", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value


class ProjectEntry(BaseModel):
    name: str = ""
    description: str = ""
    technologies: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    @field_validator("technologies", mode="before")
    @classmethod
    def _coerce_technologies(cls, value: object) -> object:
        return _string_list(value)

    @field_validator("description", mode="before")
    @classmethod
    def _join_description(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(item for item in value if isinstance(item, str))
        return value


class CandidateProfile(BaseModel):
    """Structured resume document submitted by a candidate."""

    personal_info: PersonalInfo | None = None
    summary: str = ""
    skills: DeclaredSkills | None = None
    experience: list[ExperienceEntry] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)
    education: list[dict] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    @field_validator("summary", mode="before")
    @classmethod
    def _summary_default(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("experience", "projects", "education", mode="before")
    @classmethod
    def _list_default(cls, value: object) -> object:
        if value is None or not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]


class CandidateInfo(BaseModel):
    """Contact details used when writing to companies."""

    name: str = "Unknown"
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""

    model_config = ConfigDict(extra="ignore")


class SkillProfile(BaseModel):
    """Skills, tier and roles derived from a :class:`CandidateProfile`."""

    technical: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    experience_tier: ExperienceTier = "junior"
    job_roles: list[str] = Field(default_factory=list)
    candidate_info: CandidateInfo = Field(default_factory=CandidateInfo)

    model_config = ConfigDict(extra="forbid")

    @property
    def all(self) -> list[str]:
        return [*self.technical, *self.soft, *self.languages]

    def to_payload(self) -> dict:
        return {
            "candidate_info": self.candidate_info.model_dump(),
            "skills": {
                "technical": self.technical,
                "soft": self.soft,
                "languages": self.languages,
                "all": self.all,
            },
            "experience_level": self.experience_tier,
            "job_roles": self.job_roles,
        }
