from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class JobPosting(BaseModel):
    """Job opening loaded from the tabular catalog source."""

    id: int = Field(ge=1)
    company_name: str = ""
    job_role: str = ""
    required_skills: tuple[str, ...] = ()
    company_email: str = ""
    job_description: str = ""
    location: str = ""
    salary_range: str = ""

    model_config = ConfigDict(extra="forbid", frozen=True)


def parse_skills(raw: str | None, delimiter: str = ",") -> tuple[str, ...]:
    """Split a delimited skills field, trimming entries and dropping blanks."""
    if not raw:
        return ()
    return tuple(token.strip() for token in raw.split(delimiter) if token.strip())
