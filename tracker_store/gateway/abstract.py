"""
Abstract gateway interface for the tracker store.

Ingestion and rating jobs depend on the SqlClient protocol rather than on a
concrete backend, so tests can substitute an in-memory fake and the
PostgreSQL implementation stays swappable.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Protocol, runtime_checkable

from tracker_store.domain.models import Contest, ContestProblem, Performance, Problem, Submission


@runtime_checkable
class SqlClient(Protocol):
    """
    Typed data-access interface over the five relations.

    Every write takes a batch, runs it as one unit of work, and returns the
    number of rows inserted or updated. Every read returns rows in no
    particular order.
    """

    def insert_submissions(self, rows: Iterable[Any]) -> int:
        """Upsert by `id`; a conflict overwrites `user_id, result, point, execution_time`."""
        ...

    def insert_contests(self, rows: Iterable[Any]) -> int:
        """Insert by `id`; a conflict keeps the stored row."""
        ...

    def insert_problems(self, rows: Iterable[Any]) -> int:
        """Insert by `id`; a conflict keeps the stored row."""
        ...

    def insert_contest_problem_pairs(self, pairs: Iterable[Any]) -> int:
        """Insert `(contest_id, problem_id)` pairs; duplicates are ignored."""
        ...

    def insert_performances(self, rows: Iterable[Any]) -> int:
        """Insert by `(contest_id, user_id)`; a recorded performance is never revised."""
        ...

    def get_problems(self) -> List[Problem]:
        ...

    def get_contests(self) -> List[Contest]:
        ...

    def get_submissions(self, user_id: str) -> List[Submission]:
        ...

    def get_contest_problem_pairs(self) -> List[ContestProblem]:
        ...

    def get_performances(self, contest_id: str) -> List[Performance]:
        ...

    def get_contests_without_performances(self) -> List[str]:
        """Ids of rating-eligible contests that have no performance rows yet."""
        ...


__all__ = ["SqlClient"]
