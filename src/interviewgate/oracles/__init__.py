"""External AI collaborators used to write and score interview questions."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from .gemini import GeminiClient, GeminiEvaluationOracle, GeminiQuestionOracle


@runtime_checkable
class QuestionOracle(Protocol):
    """Question generation contract.

    Implementations return raw question objects carrying ``skill``,
    ``question``, ``correct_answer``, ``difficulty`` and ``keywords``; the
    core validates and trims them.
    """

    def generate_questions(self, skills: Sequence[str], experience_level: str) -> list[dict[str, Any]]:
        """Return interview questions for the given skills and tier."""


@runtime_checkable
class EvaluationOracle(Protocol):
    """Answer scoring contract.

    Implementations return a raw rubric payload with ``accuracy``,
    ``completeness``, ``clarity``, ``keyword_score`` and optional ``score``,
    ``feedback``, ``strengths`` and ``improvements``.
    """

    def evaluate_answer(
        self,
        question: str,
        answer: str,
        reference_answer: str,
        keywords: Sequence[str],
    ) -> dict[str, Any]:
        """Score one candidate answer against the reference answer."""


__all__ = [
    "QuestionOracle",
    "EvaluationOracle",
    "GeminiClient",
    "GeminiQuestionOracle",
    "GeminiEvaluationOracle",
]
