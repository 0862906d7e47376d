# fitplan/errors.py
"""
Exception hierarchy for plan generation and the adjacent plan/progress flows.

Every error carries the HTTP status it maps to; main.py turns them into
``{"error": ..., "kind": ...}`` bodies.
"""
import re
from typing import Optional


class FitPlanError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str = "An error occurred", status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    @property
    def kind(self) -> str:
        # RateLimited -> rate_limited
        return re.sub(r"(?<!^)(?=[A-Z])", "_", type(self).__name__).lower()


class PlanGenerationError(FitPlanError):
    """A generate() call failed; the caller may retry the whole call."""


class RateLimited(PlanGenerationError):
    """The model provider throttled the request. Nothing was stored."""

    status_code = 429


class ProviderFailure(PlanGenerationError):
    """The model provider call failed for any reason other than throttling."""

    status_code = 502


class MalformedResponse(PlanGenerationError):
    """The provider answered, but not with a plan array we can accept."""

    status_code = 502


class PersistenceError(PlanGenerationError):
    """Reading or writing the plan store failed."""

    status_code = 500


class GenerationInProgress(PlanGenerationError):
    """Another generate() call for the same owner holds the lock."""

    status_code = 409


class PlanItemNotFound(FitPlanError):
    status_code = 404


class InvalidGoal(ValueError):
    """Raised when a goal outside the FitnessGoal enum reaches the service."""
