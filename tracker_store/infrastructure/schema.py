"""
Table definitions for the tracker store.

Creates the five relations if they do not already exist. Safe to run more
than once; this is not a migration system.
"""

from __future__ import annotations

from psycopg import Connection

from tracker_store.utils.logging import get_logger

log = get_logger(__name__)

TABLES = ("submissions", "contests", "problems", "contest_problem", "performances")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS submissions (
    id              BIGINT PRIMARY KEY,
    epoch_second    BIGINT NOT NULL,
    problem_id      VARCHAR(255) NOT NULL,
    contest_id      VARCHAR(255) NOT NULL,
    user_id         VARCHAR(255) NOT NULL,
    language        VARCHAR(255) NOT NULL,
    point           DOUBLE PRECISION NOT NULL,
    length          INT NOT NULL,
    result          VARCHAR(255) NOT NULL,
    execution_time  INT
);

CREATE TABLE IF NOT EXISTS contests (
    id                  VARCHAR(255) PRIMARY KEY,
    start_epoch_second  BIGINT NOT NULL,
    duration_second     BIGINT NOT NULL,
    title               VARCHAR(255) NOT NULL,
    rate_change         VARCHAR(255) NOT NULL
);

CREATE TABLE IF NOT EXISTS problems (
    id          VARCHAR(255) PRIMARY KEY,
    contest_id  VARCHAR(255) NOT NULL,
    title       VARCHAR(255) NOT NULL
);

-- Pure join table; no payload beyond the key.
CREATE TABLE IF NOT EXISTS contest_problem (
    contest_id  VARCHAR(255) NOT NULL,
    problem_id  VARCHAR(255) NOT NULL,
    PRIMARY KEY (contest_id, problem_id)
);

CREATE TABLE IF NOT EXISTS performances (
    inner_performance   BIGINT NOT NULL,
    contest_id          VARCHAR(255) NOT NULL,
    user_id             VARCHAR(255) NOT NULL,
    PRIMARY KEY (contest_id, user_id)
);

CREATE INDEX IF NOT EXISTS idx_submissions_user_id ON submissions(user_id);
"""


def apply_schema(conn: Connection) -> None:
    """Execute the schema DDL in its own transaction."""
    with conn.transaction():
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
    log.info("Database schema initialized", extra={"tables": list(TABLES)})


__all__ = ["SCHEMA_SQL", "TABLES", "apply_schema"]
