"""Answer evaluation and verification aggregation."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Sequence

import pydantic
import structlog
from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, field_validator

from ..errors import EvaluationError, InterviewGateError, ShapeMismatchError, ValidationError
from ..oracles import EvaluationOracle
from ..schemas import AnswerEvaluation, Question, SubScores, VerificationResult
from ..schemas.interview import round_half_up

_SUBSCORE_LIMITS: dict[str, int] = {
    "accuracy": 40,
    "completeness": 30,
    "clarity": 20,
    "keywords": 10,
}


class _OraclePayload(BaseModel):
    """Shape an evaluation oracle response must have before it is trusted."""

    accuracy: StrictInt | StrictFloat
    completeness: StrictInt | StrictFloat
    clarity: StrictInt | StrictFloat
    keyword_score: StrictInt | StrictFloat
    score: StrictInt | StrictFloat | None = None
    feedback: str = ""
    strengths: list[str] = []
    improvements: list[str] = []

    model_config = ConfigDict(extra="ignore")

    @field_validator("accuracy", "completeness", "clarity", "keyword_score", "score")
    @classmethod
    def _finite(cls, value: float | None) -> float | None:
        if value is not None and not math.isfinite(value):
            raise ValueError("score fields must be finite numbers")
        return value

    @field_validator("feedback", mode="before")
    @classmethod
    def _feedback_default(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("strengths", "improvements", mode="before")
    @classmethod
    def _notes_default(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(item) for item in value]
        return value


def _clamp(value: float, upper: int) -> int:
    return int(min(max(round(value), 0), upper))


def normalize_evaluation(question: Question, payload: Any) -> AnswerEvaluation:
    """Validate a raw oracle payload and clamp it into an :class:`AnswerEvaluation`.

    Fails closed: a missing or non-numeric rubric field raises
    :class:`EvaluationError` instead of defaulting. Out-of-range values are
    clamped and the total is recomputed from the clamped subscores.
    """
    if not isinstance(payload, dict):
        raise EvaluationError(f"Evaluation for question {question.id} is not an object")
    try:
        raw = _OraclePayload.model_validate(payload)
    except pydantic.ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise EvaluationError(
            f"Evaluation for question {question.id} is malformed: {field}: {error['msg']}"
        ) from exc

    subscores = SubScores(
        accuracy=_clamp(raw.accuracy, _SUBSCORE_LIMITS["accuracy"]),
        completeness=_clamp(raw.completeness, _SUBSCORE_LIMITS["completeness"]),
        clarity=_clamp(raw.clarity, _SUBSCORE_LIMITS["clarity"]),
        keywords=_clamp(raw.keyword_score, _SUBSCORE_LIMITS["keywords"]),
    )
    if raw.score is not None and _clamp(raw.score, 100) != subscores.total:
        structlog.get_logger(__name__).warning(
            "evaluation.score_mismatch",
            question_id=question.id,
            reported=raw.score,
            recomputed=subscores.total,
        )
    return AnswerEvaluation(
        question_id=question.id,
        skill=question.skill,
        score=subscores.total,
        subscores=subscores,
        feedback=raw.feedback,
        strengths=raw.strengths,
        improvements=raw.improvements,
    )


def aggregate(evaluations: Sequence[AnswerEvaluation]) -> VerificationResult:
    """Combine per-answer evaluations into a verification verdict."""
    if not evaluations:
        raise ValidationError("At least one evaluation is required")
    total = sum(evaluation.score for evaluation in evaluations)
    return VerificationResult(
        average_score=round_half_up(total, len(evaluations)),
        total_score=total,
        passed_count=sum(1 for evaluation in evaluations if evaluation.passed),
        total_questions=len(evaluations),
        evaluations=list(evaluations),
    )


@dataclass
class VerificationConfig:
    """Execution options for the evaluation batch."""

    max_workers: int = 1


class VerificationAggregator:
    """Evaluate every answer through the oracle and aggregate the verdict."""

    def __init__(
        self,
        oracle: EvaluationOracle,
        *,
        config: VerificationConfig | None = None,
    ) -> None:
        self._oracle = oracle
        self._config = config or VerificationConfig()
        self._logger = structlog.get_logger(__name__)

    def evaluate(self, questions: Sequence[Question], answers: Sequence[str]) -> VerificationResult:
        if len(questions) != len(answers):
            raise ShapeMismatchError(
                "Number of questions must match number of answers",
                questions=len(questions),
                answers=len(answers),
            )
        if not questions:
            raise ValidationError("questions array must not be empty")

        pairs = list(zip(questions, answers))
        if self._config.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self._config.max_workers) as pool:
                evaluations = list(pool.map(self._evaluate_one, pairs))
        else:
            evaluations = [self._evaluate_one(pair) for pair in pairs]

        result = aggregate(evaluations)
        self._logger.info(
            "verification.completed",
            average_score=result.average_score,
            passed_count=result.passed_count,
            total_questions=result.total_questions,
            is_verified=result.is_verified,
        )
        return result

    def aggregate(self, evaluations: Sequence[AnswerEvaluation]) -> VerificationResult:
        return aggregate(evaluations)

    def _evaluate_one(self, pair: tuple[Question, str]) -> AnswerEvaluation:
        question, answer = pair
        try:
            payload = self._oracle.evaluate_answer(
                question.question,
                answer,
                question.correct_answer,
                list(question.keywords),
            )
        except EvaluationError:
            raise
        except InterviewGateError as exc:
            self._logger.warning("evaluation.failed", question_id=question.id, error=exc.message)
            raise EvaluationError(
                f"Failed to evaluate answer {question.id}: {exc.message}"
            ) from exc
        return normalize_evaluation(question, payload)
