"""Service-layer exceptions for the recommendation engine.

Routers translate these into HTTP responses; see ``status_code_for``.
"""

from __future__ import annotations


class RecommendationError(Exception):
    """Base exception for recommendation service errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(RecommendationError):
    """Raised when a user, job or recommendation does not exist."""

    status_code = 404


class RecommendationValidationError(RecommendationError):
    """Raised for out-of-range ratings, limits or score thresholds."""

    status_code = 400


class PermissionDeniedError(RecommendationError):
    """Raised when the caller's role may not use the operation."""

    status_code = 403


class ConflictError(RecommendationError):
    """Raised when the request clashes with existing state (e.g. a duplicate application)."""

    status_code = 409


class ScoringError(RecommendationError):
    """Raised when a single job record cannot be scored.

    The orchestrator catches this per job; it never reaches the caller.
    """

    def __init__(self, job_id: object, message: str) -> None:
        super().__init__(f"job {job_id}: {message}")
        self.job_id = job_id


def status_code_for(exc: RecommendationError) -> int:
    return int(getattr(exc, "status_code", 500))
