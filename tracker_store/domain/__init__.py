"""
Domain package for the tracker store.

Exports the entity models persisted by the gateway and the rating
eligibility policy. Keep this package focused on data definitions and
validation concerns.
"""

from tracker_store.domain.models import (
    Contest,
    ContestProblem,
    EligibilityPolicy,
    Performance,
    Problem,
    Submission,
    coerce_pairs,
    coerce_rows,
)

__all__ = [
    "Contest",
    "ContestProblem",
    "EligibilityPolicy",
    "Performance",
    "Problem",
    "Submission",
    "coerce_pairs",
    "coerce_rows",
]
