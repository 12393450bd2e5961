"""
PostgreSQL implementation of the SqlClient gateway.

Each public call borrows one pooled connection, runs inside a single
transaction, and returns it. Nothing is cached between calls, so one
instance can be shared by concurrent callers.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Generator, Iterable, List, Optional, Sequence, TypeVar

import psycopg
from psycopg.rows import dict_row
from pydantic import BaseModel

from tracker_store.config import Settings, get_settings
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
from tracker_store.errors import MalformedInputError, StoreError, translate_error
from tracker_store.gateway.statements import (
    CONTEST_PROBLEM,
    CONTESTS,
    CONTESTS_WITHOUT_PERFORMANCES_SQL,
    PERFORMANCES,
    PROBLEMS,
    SUBMISSIONS,
    UpsertSpec,
)
from tracker_store.infrastructure.db_factory import get_sync_pool
from tracker_store.utils.logging import get_logger

log = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


def _log_failure(operation: str, error: StoreError) -> None:
    log.warning(
        "Store operation failed",
        extra={"operation": operation, "error_kind": type(error).__name__},
    )


def _select_all(spec: UpsertSpec) -> str:
    return f"SELECT {', '.join(spec.columns)} FROM {spec.table}"


class PgSqlClient:
    """
    Persistence gateway backed by a psycopg connection pool.

    Parameters
    ----------
    pool : psycopg_pool.ConnectionPool
        Any object exposing a `connection()` context manager yielding a
        psycopg connection.
    policy : EligibilityPolicy, optional
        Cutoff and unrated sentinel used by `get_contests_without_performances`.
        Defaults to the values from settings.
    batch_size : int, optional
        Maximum rows per INSERT statement. Defaults to settings.
    """

    def __init__(
        self,
        pool: Any,
        policy: Optional[EligibilityPolicy] = None,
        batch_size: Optional[int] = None,
    ) -> None:
        settings = get_settings()
        self._pool = pool
        self.policy = policy or EligibilityPolicy(
            first_agc_epoch_second=settings.first_agc_epoch_second,
            unrated_state=settings.unrated_state,
        )
        self.batch_size = settings.batch_size if batch_size is None else batch_size
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PgSqlClient":
        """Build a client on the process-wide pool."""
        settings = settings or get_settings()
        pool = get_sync_pool(min_size=settings.pool_min_size, max_size=settings.pool_max_size)
        return cls(
            pool,
            policy=EligibilityPolicy(
                first_agc_epoch_second=settings.first_agc_epoch_second,
                unrated_state=settings.unrated_state,
            ),
            batch_size=settings.batch_size,
        )

    @contextmanager
    def _cursor(self, operation: str) -> Generator[psycopg.Cursor, None, None]:
        """Yield a dict-row cursor inside one transaction; translate driver errors."""
        try:
            with self._pool.connection() as conn:
                with conn.transaction():
                    with conn.cursor(row_factory=dict_row) as cur:
                        yield cur
        except psycopg.Error as exc:
            error = translate_error(exc, operation)
            _log_failure(operation, error)
            raise error from exc

    def _validated(self, operation: str, convert: Callable[..., List[M]], *args: Any) -> List[M]:
        """Run a coerce_* function, tagging and logging MalformedInputError with `operation`."""
        try:
            return convert(*args, operation=operation)
        except MalformedInputError as exc:
            _log_failure(operation, exc)
            raise

    def _write(self, operation: str, spec: UpsertSpec, rows: Sequence[BaseModel]) -> int:
        merged = spec.collapse(rows)
        if not merged:
            return 0

        chunk_size = min(self.batch_size, spec.max_rows_per_statement)
        affected = 0
        with self._cursor(operation) as cur:
            for start in range(0, len(merged), chunk_size):
                chunk = merged[start : start + chunk_size]
                cur.execute(spec.render(len(chunk)), spec.params(chunk))
                affected += max(cur.rowcount, 0)

        log.debug(
            "Batch written",
            extra={"operation": operation, "rows": len(rows), "affected": affected},
        )
        return affected

    def _read(self, operation: str, sql: str, params: Sequence[Any] = ()) -> List[dict]:
        with self._cursor(operation) as cur:
            cur.execute(sql, params)
            return cur.fetchall()

    # Writes

    def insert_submissions(self, rows: Iterable[Any]) -> int:
        op = "insert_submissions"
        return self._write(op, SUBMISSIONS, self._validated(op, coerce_rows, rows, Submission))

    def insert_contests(self, rows: Iterable[Any]) -> int:
        op = "insert_contests"
        return self._write(op, CONTESTS, self._validated(op, coerce_rows, rows, Contest))

    def insert_problems(self, rows: Iterable[Any]) -> int:
        op = "insert_problems"
        return self._write(op, PROBLEMS, self._validated(op, coerce_rows, rows, Problem))

    def insert_contest_problem_pairs(self, pairs: Iterable[Any]) -> int:
        op = "insert_contest_problem_pairs"
        return self._write(op, CONTEST_PROBLEM, self._validated(op, coerce_pairs, pairs))

    def insert_performances(self, rows: Iterable[Any]) -> int:
        op = "insert_performances"
        return self._write(op, PERFORMANCES, self._validated(op, coerce_rows, rows, Performance))

    # Reads; stored rows go through the same validation as written ones.

    def get_problems(self) -> List[Problem]:
        op = "get_problems"
        return self._validated(op, coerce_rows, self._read(op, _select_all(PROBLEMS)), Problem)

    def get_contests(self) -> List[Contest]:
        op = "get_contests"
        return self._validated(op, coerce_rows, self._read(op, _select_all(CONTESTS)), Contest)

    def get_submissions(self, user_id: str) -> List[Submission]:
        op = "get_submissions"
        rows = self._read(op, _select_all(SUBMISSIONS) + " WHERE user_id = %s", (user_id,))
        return self._validated(op, coerce_rows, rows, Submission)

    def get_contest_problem_pairs(self) -> List[ContestProblem]:
        op = "get_contest_problem_pairs"
        rows = self._read(op, _select_all(CONTEST_PROBLEM))
        return self._validated(op, coerce_rows, rows, ContestProblem)

    def get_performances(self, contest_id: str) -> List[Performance]:
        op = "get_performances"
        rows = self._read(op, _select_all(PERFORMANCES) + " WHERE contest_id = %s", (contest_id,))
        return self._validated(op, coerce_rows, rows, Performance)

    def get_contests_without_performances(self) -> List[str]:
        rows = self._read(
            "get_contests_without_performances",
            CONTESTS_WITHOUT_PERFORMANCES_SQL,
            (self.policy.first_agc_epoch_second, self.policy.unrated_state),
        )
        return [row["id"] for row in rows]


__all__ = ["PgSqlClient"]
