"""Interview question generation on top of a :class:`QuestionOracle`."""

from __future__ import annotations

from typing import Any, Sequence

import pydantic
import structlog

from ..errors import OracleError, ValidationError
from ..oracles import QuestionOracle
from ..schemas import QUESTIONS_PER_SESSION, ExperienceTier, Question

MAX_SKILLS = 5
_TIERS: tuple[str, ...] = ("junior", "mid", "senior")


class QuestionGenerator:
    """Validate oracle questions and enforce the per-session count."""

    def __init__(self, oracle: QuestionOracle, *, count: int = QUESTIONS_PER_SESSION) -> None:
        self._oracle = oracle
        self._count = count
        self._logger = structlog.get_logger(__name__)

    def generate(self, skills: Sequence[str], experience_level: str = "mid") -> list[Question]:
        selected = [skill.strip() for skill in skills if isinstance(skill, str) and skill.strip()]
        if not selected:
            raise ValidationError("skills array is required and must not be empty")
        selected = selected[:MAX_SKILLS]
        tier = self._resolve_tier(experience_level)

        raw = self._oracle.generate_questions(selected, tier)
        if not isinstance(raw, list):
            raise OracleError("Question oracle returned a non-list payload")

        if len(raw) > self._count:
            self._logger.info("questions.truncated", received=len(raw), kept=self._count)
            raw = raw[: self._count]

        questions = [self._parse(index, item) for index, item in enumerate(raw, start=1)]
        if not questions:
            raise OracleError("Question oracle returned no questions")
        if len(questions) < self._count:
            self._logger.warning(
                "questions.degraded", received=len(questions), expected=self._count
            )
        return questions

    @staticmethod
    def _resolve_tier(experience_level: str) -> ExperienceTier:
        level = (experience_level or "mid").strip().lower()
        if level not in _TIERS:
            raise ValidationError(f"Unsupported experience level: {experience_level!r}")
        return level  # type: ignore[return-value]

    @staticmethod
    def _parse(index: int, item: Any) -> Question:
        if not isinstance(item, dict):
            raise OracleError(f"Question {index} is not an object")
        payload = dict(item)
        # ids are reassigned so a session always holds 1..N
        payload["id"] = index
        try:
            return Question.model_validate(payload)
        except pydantic.ValidationError as exc:
            raise OracleError(f"Question {index} is malformed: {exc.errors()[0]['msg']}") from exc
