from __future__ import annotations

from typing import Any

import pytest

from interviewgate.core import SkillExtractor
from interviewgate.errors import ValidationError


def build_resume(**kwargs: Any) -> dict[str, Any]:
    resume: dict[str, Any] = {
        "personal_info": {"name": "Ada Lovelace", "email": "ada@example.com"},
        "skills": {"technical": ["Python"], "soft": ["Communication"], "languages": ["English"]},
    }
    resume.update(kwargs)
    return resume


def test_extract_unions_declared_and_mined_skills():
    resume = build_resume(
        experience=[
            {
                "title": "Backend Engineer",
                "company": "Acme",
                "description": ["Built REST services with Django and PostgreSQL", "Ran Docker"],
            }
        ],
        projects=[{"name": "Dash", "technologies": ["React", "Python"], "description": "Deployed on AWS"}],
    )

    profile = SkillExtractor().extract(resume)

    assert profile.technical[0] == "Python"
    assert {"Django", "PostgreSQL", "Docker", "REST", "React", "AWS"} <= set(profile.technical)
    assert profile.technical.count("Python") == 1
    assert profile.soft == ["Communication"]
    assert profile.languages == ["English"]
    assert profile.all == [*profile.technical, "Communication", "English"]


def test_mined_skills_never_remove_declared_and_dedupe_is_case_sensitive():
    resume = build_resume(
        skills={"technical": ["python", "Kotlin"]},
        experience=[{"title": "Dev", "description": ["Python scripting"]}],
    )

    profile = SkillExtractor().extract(resume)

    assert profile.technical == ["python", "Kotlin", "Python"]


def test_blank_and_duplicate_entries_are_dropped_in_first_seen_order():
    resume = build_resume(skills={"technical": ["Go", "", "  ", "Rust", "Go"], "soft": None})

    profile = SkillExtractor().extract(resume)

    assert profile.technical == ["Go", "Rust"]
    assert profile.soft == []


@pytest.mark.parametrize(
    ("entries", "tier"),
    [(0, "junior"), (1, "junior"), (2, "mid"), (4, "mid"), (5, "senior"), (9, "senior")],
)
def test_experience_tier_uses_entry_count_heuristic(entries: int, tier: str):
    resume = build_resume(experience=[{"title": f"Role {i}"} for i in range(entries)])

    assert SkillExtractor().extract(resume).experience_tier == tier


def test_job_roles_from_titles_and_summary():
    resume = build_resume(
        summary="Senior data scientist and team lead",
        experience=[{"title": "Software Engineer"}, {"title": "Software Engineer"}],
    )

    profile = SkillExtractor().extract(resume)

    assert profile.job_roles == ["software engineer", "data scientist", "lead"]


def test_missing_identity_and_skills_blocks_fails():
    with pytest.raises(ValidationError):
        SkillExtractor().extract({"summary": "hello"})


def test_single_block_is_enough_and_defaults_apply():
    profile = SkillExtractor().extract({"skills": {"technical": ["SQL"]}})

    assert profile.technical == ["SQL"]
    assert profile.candidate_info.name == "Unknown"
    assert profile.job_roles == []
    assert profile.experience_tier == "junior"


def test_non_object_payload_fails():
    with pytest.raises(ValidationError):
        SkillExtractor().extract(["not", "a", "resume"])
