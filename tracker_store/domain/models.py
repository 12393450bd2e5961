"""
Domain models for the tracker store.

Each model mirrors one relation in `infrastructure/schema.py`. Models are
frozen so rows read back from the store can be shared between callers.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError

from tracker_store.config import FIRST_AGC_EPOCH_SECOND, UNRATED_STATE
from tracker_store.errors import MalformedInputError

_FROZEN = {
    "frozen": True,
    "populate_by_name": True,
    "arbitrary_types_allowed": False,
}


class Submission(BaseModel):
    """
    A single judged submission, keyed by the id the judge assigned to it.

    `user_id`, `result`, `point` and `execution_time` may be revised when
    the judge re-judges the submission; the other fields never change.
    """

    id: int = Field(..., description="Submission id assigned by the judge.")
    epoch_second: int = Field(..., description="Submission time (Unix seconds).")
    problem_id: str
    contest_id: str
    user_id: str
    language: str
    point: float
    length: int = Field(..., description="Source length in bytes.")
    result: str = Field(..., description="Judge status code, e.g. AC or WJ.")
    execution_time: Optional[int] = Field(None, description="Milliseconds, when judged.")

    model_config = _FROZEN


class Contest(BaseModel):
    """Contest metadata. Immutable once stored."""

    id: str = Field(..., min_length=1)
    start_epoch_second: int
    duration_second: int
    title: str
    rate_change: str = Field(..., description="Rated range, or the unrated sentinel.")

    model_config = _FROZEN


class Problem(BaseModel):
    """Problem metadata. Immutable once stored."""

    id: str = Field(..., min_length=1)
    contest_id: str
    title: str

    model_config = _FROZEN


class ContestProblem(BaseModel):
    """Membership of a problem in a contest."""

    contest_id: str = Field(..., min_length=1)
    problem_id: str = Field(..., min_length=1)

    model_config = _FROZEN


class Performance(BaseModel):
    """A user's rating performance in one contest, recorded exactly once."""

    contest_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    inner_performance: int

    model_config = _FROZEN


class EligibilityPolicy(BaseModel):
    """
    Decides which contests the rating job still has to process.

    A contest is eligible when it started in the rating-eligible era, its
    `rate_change` is not the unrated sentinel, and no performance has been
    recorded for it yet.
    """

    first_agc_epoch_second: int = FIRST_AGC_EPOCH_SECOND
    unrated_state: str = UNRATED_STATE

    model_config = _FROZEN

    def is_eligible(self, contest: Contest, has_performances: bool) -> bool:
        return (
            not has_performances
            and contest.start_epoch_second >= self.first_agc_epoch_second
            and contest.rate_change != self.unrated_state
        )


M = TypeVar("M", bound=BaseModel)


def coerce_rows(
    rows: Iterable[Any], model: Type[M], operation: Optional[str] = None
) -> List[M]:
    """
    Validate a batch into `model` instances.

    Elements may already be instances of `model` or plain mappings. The first
    invalid element rejects the whole batch; `operation` is attached to the
    raised MalformedInputError.
    """
    if isinstance(rows, (str, bytes, Mapping)):
        raise MalformedInputError(f"expected a sequence of {model.__name__} rows", operation)
    coerced: List[M] = []
    for index, row in enumerate(rows):
        if isinstance(row, model):
            coerced.append(row)
            continue
        if not isinstance(row, Mapping):
            raise MalformedInputError(
                f"row {index}: expected {model.__name__} or mapping, got {type(row).__name__}",
                operation,
            )
        try:
            coerced.append(model.model_validate(row))
        except ValidationError as exc:
            raise MalformedInputError(f"row {index}: {exc}", operation) from exc
    return coerced


def coerce_pairs(pairs: Iterable[Any], operation: Optional[str] = None) -> List[ContestProblem]:
    """Accept `ContestProblem` instances, mappings, or `(contest_id, problem_id)` tuples."""
    normalized: List[Any] = []
    for index, pair in enumerate(pairs):
        if isinstance(pair, Sequence) and not isinstance(pair, (str, bytes)):
            if len(pair) != 2:
                raise MalformedInputError(
                    f"row {index}: expected (contest_id, problem_id), got {len(pair)} items",
                    operation,
                )
            pair = {"contest_id": pair[0], "problem_id": pair[1]}
        normalized.append(pair)
    return coerce_rows(normalized, ContestProblem, operation)


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
