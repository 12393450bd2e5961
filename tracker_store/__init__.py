"""
Tracker Store - persistence layer for a competitive-programming data tracker.

This package records contests, problems, user submissions and per-contest
rating performances in PostgreSQL, and answers the eligibility query that
tells the rating job which contests still need processing:

- Conflict-aware batch writes (upsert for submissions, insert-once elsewhere)
- Whole-table and per-user reads
- The contests-without-performances anti-join

Ingestion and rating jobs are external; they talk to the store through the
SqlClient interface.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from tracker_store.config import (
    FIRST_AGC_EPOCH_SECOND,
    UNRATED_STATE,
    Settings,
    get_settings,
)
from tracker_store.domain.models import (
    Contest,
    ContestProblem,
    EligibilityPolicy,
    Performance,
    Problem,
    Submission,
)
from tracker_store.errors import (
    ConnectivityError,
    ConstraintError,
    MalformedInputError,
    StoreError,
)
from tracker_store.gateway import PgSqlClient, SqlClient
from tracker_store.retry import retry_on_connectivity
from tracker_store.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "FIRST_AGC_EPOCH_SECOND",
    "UNRATED_STATE",
    "Settings",
    "get_settings",
    # Entities
    "Contest",
    "ContestProblem",
    "EligibilityPolicy",
    "Performance",
    "Problem",
    "Submission",
    # Gateway
    "PgSqlClient",
    "SqlClient",
    # Errors
    "ConnectivityError",
    "ConstraintError",
    "MalformedInputError",
    "StoreError",
    "retry_on_connectivity",
    # Logging
    "configure_logging",
    "get_logger",
]
