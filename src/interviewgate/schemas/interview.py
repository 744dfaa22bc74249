"""Interview questions, answer evaluations and verification verdicts."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

PASSING_THRESHOLD = 70
QUESTIONS_PER_SESSION = 5

Difficulty = Literal["easy", "medium", "hard"]
Verdict = Literal["pass", "fail"]


def round_half_up(total: int, count: int) -> int:
    """Integer mean of ``total / count`` rounded half up."""
    return (2 * total + count) // (2 * count)


class Question(BaseModel):
    """Interview question including its server-side reference answer."""

    id: int = Field(ge=1)
    skill: str = Field(min_length=1)
    question: str = Field(min_length=1)
    correct_answer: str = Field(min_length=1)
    difficulty: Difficulty = "medium"
    keywords: list[str]

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("keywords")
    @classmethod
    def _clean_keywords(cls, value: list[str]) -> list[str]:
        cleaned = [keyword.strip() for keyword in value if keyword and keyword.strip()]
        if not cleaned:
            raise ValueError("keywords must contain at least one non-blank entry")
        return cleaned

    def public(self) -> "PublicQuestion":
        return PublicQuestion(
            id=self.id,
            skill=self.skill,
            question=self.question,
            difficulty=self.difficulty,
        )


class PublicQuestion(BaseModel):
    """Candidate-facing projection of a :class:`Question`."""

    id: int
    skill: str
    question: str
    difficulty: Difficulty

    model_config = ConfigDict(extra="ignore", frozen=True)


class SubScores(BaseModel):
    """Rubric breakdown of an answer score."""

    accuracy: int = Field(ge=0, le=40)
    completeness: int = Field(ge=0, le=30)
    clarity: int = Field(ge=0, le=20)
    keywords: int = Field(ge=0, le=10)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def total(self) -> int:
        return self.accuracy + self.completeness + self.clarity + self.keywords


class AnswerEvaluation(BaseModel):
    """Rubric-scored evaluation of one answer."""

    question_id: int
    skill: str
    score: int = Field(ge=0, le=100)
    subscores: SubScores
    feedback: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_validator(mode="after")
    def _score_matches_subscores(self) -> "AnswerEvaluation":
        if self.score != self.subscores.total:
            raise ValueError(
                f"score {self.score} does not equal the subscore sum {self.subscores.total}"
            )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def passed(self) -> bool:
        return self.score >= PASSING_THRESHOLD

    @computed_field  # type: ignore[prop-decorator]
    @property
    def verdict(self) -> Verdict:
        return "pass" if self.passed else "fail"


class VerificationResult(BaseModel):
    """Aggregated verdict over one interview session.

    ``threshold`` and ``is_verified`` are derived on every access; values for
    them supplied in input payloads are ignored. When ``evaluations`` are
    present the aggregate fields are derived from them, and supplied values
    that disagree are rejected.
    """

    average_score: int = Field(ge=0, le=100)
    total_score: int = Field(default=0, ge=0)
    passed_count: int = Field(default=0, ge=0)
    total_questions: int = Field(default=0, ge=0)
    evaluations: list[AnswerEvaluation] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_validator(mode="after")
    def _aggregate_matches_evaluations(self) -> "VerificationResult":
        if not self.evaluations:
            return self
        total = sum(evaluation.score for evaluation in self.evaluations)
        derived = {
            "average_score": round_half_up(total, len(self.evaluations)),
            "total_score": total,
            "passed_count": sum(1 for evaluation in self.evaluations if evaluation.passed),
            "total_questions": len(self.evaluations),
        }
        for name, value in derived.items():
            supplied = getattr(self, name)
            if name in self.model_fields_set and supplied != value:
                raise ValueError(f"{name} {supplied} does not match its evaluations ({value})")
            self.__dict__[name] = value
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def threshold(self) -> int:
        return PASSING_THRESHOLD

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_verified(self) -> bool:
        return self.average_score >= PASSING_THRESHOLD

    @property
    def status(self) -> str:
        return "VERIFIED" if self.is_verified else "NOT_VERIFIED"

    def summary(self) -> dict:
        return {
            "passed_questions": self.passed_count,
            "total_questions": self.total_questions,
            "status": self.status,
        }
