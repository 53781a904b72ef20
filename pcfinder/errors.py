"""Exception hierarchy for the PC Finder engine."""

from __future__ import annotations

from typing import List, Optional


class RecommendationError(Exception):
    """Base exception for all engine errors."""


class InvalidProfile(RecommendationError):
    """Raised when questionnaire answers are missing, unrecognized, or out of range.

    Fatal: the facade surfaces it immediately without building anything.
    """

    def __init__(self, message: str, errors: Optional[List[dict]] = None) -> None:
        super().__init__(message)
        self.errors: List[dict] = errors or []


class BudgetTooLow(InvalidProfile):
    """Raised when the budget is below the minimum a complete build needs."""

    def __init__(self, budget: float, minimum: float) -> None:
        super().__init__(
            f"Budget £{budget:,.0f} is below the £{minimum:,.0f} minimum "
            "for a complete build",
            errors=[{"field": "budget", "message": "budget too low"}],
        )
        self.budget = budget
        self.minimum = minimum


class CatalogUnavailable(RecommendationError):
    """Raised when the catalog is empty or lacks a required category."""


class InternalInvariantError(RecommendationError):
    """Raised when a scoring invariant is broken (score range or grade bands)."""
