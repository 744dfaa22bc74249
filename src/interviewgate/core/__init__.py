"""Decision logic: skills, verification gate, catalog, matching, dispatch."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .catalog import CatalogSnapshot, JobCatalog
from .dispatcher import ApplicationDispatcher, DispatchConfig
from .matcher import (
    MIN_MATCH_SCORE,
    VERIFICATION_FAILED,
    JobMatcher,
    MatchedJob,
    MatchOutcome,
)
from .questions import QuestionGenerator
from .session_cache import SessionCache
from .skills import SkillExtractor, SkillExtractorConfig
from .verification import (
    VerificationAggregator,
    VerificationConfig,
    aggregate,
    normalize_evaluation,
)

__all__ = [
    "CatalogSnapshot",
    "JobCatalog",
    "ApplicationDispatcher",
    "DispatchConfig",
    "MIN_MATCH_SCORE",
    "VERIFICATION_FAILED",
    "JobMatcher",
    "MatchedJob",
    "MatchOutcome",
    "QuestionGenerator",
    "SessionCache",
    "SkillExtractor",
    "SkillExtractorConfig",
    "VerificationAggregator",
    "VerificationConfig",
    "aggregate",
    "normalize_evaluation",
]
