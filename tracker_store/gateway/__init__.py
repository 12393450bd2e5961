"""
Gateway package for the tracker store.

Re-exports the SqlClient protocol, the PostgreSQL implementation, and the
per-relation statement specs so callers can import from
`tracker_store.gateway` directly.
"""

from tracker_store.gateway.abstract import SqlClient
from tracker_store.gateway.postgres import PgSqlClient
from tracker_store.gateway.statements import (
    CONTEST_PROBLEM,
    CONTESTS,
    PERFORMANCES,
    PROBLEMS,
    SUBMISSIONS,
    UpsertSpec,
)

__all__ = [
    "SqlClient",
    "PgSqlClient",
    "UpsertSpec",
    "CONTEST_PROBLEM",
    "CONTESTS",
    "PERFORMANCES",
    "PROBLEMS",
    "SUBMISSIONS",
]
