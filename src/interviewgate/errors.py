"""Error taxonomy shared by the core, the oracles and the HTTP layer."""

from __future__ import annotations

from typing import Any


class InterviewGateError(Exception):
    """Base error carrying a machine-readable kind and an HTTP status."""

    kind = "internal_error"
    status_code = 500

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        return {"success": False, "kind": self.kind, "error": self.message}


class ValidationError(InterviewGateError):
    """Malformed or missing caller input."""

    kind = "validation_error"
    status_code = 400


class ShapeMismatchError(ValidationError):
    """Questions and answers do not line up one to one."""

    kind = "shape_mismatch"


class NotFoundError(InterviewGateError):
    kind = "not_found"
    status_code = 404


class CatalogLoadError(InterviewGateError):
    """The job source could not be read; the previous catalog stays active."""

    kind = "catalog_load_error"


class CatalogEmptyError(InterviewGateError):
    """Matching was requested before any job was loaded."""

    kind = "catalog_empty"


class OracleError(InterviewGateError):
    """The external AI dependency failed or returned an unusable payload."""

    kind = "oracle_error"


class OracleUnavailableError(OracleError):
    kind = "oracle_unavailable"


class EvaluationError(OracleError):
    """A single answer evaluation failed, aborting the whole batch."""

    kind = "evaluation_error"


class DispatchError(InterviewGateError):
    """Delivery of a single application failed."""

    kind = "dispatch_error"


__all__ = [
    "InterviewGateError",
    "ValidationError",
    "ShapeMismatchError",
    "NotFoundError",
    "CatalogLoadError",
    "CatalogEmptyError",
    "OracleError",
    "OracleUnavailableError",
    "EvaluationError",
    "DispatchError",
]
