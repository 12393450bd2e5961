"""In-process stand-ins for a psycopg pool, connection, and cursor."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any

import pytest


class FakeCursor(AbstractContextManager["FakeCursor"]):
    def __init__(self, conn: FakeConnection) -> None:
        self._conn = conn
        self.rowcount = -1

    def execute(self, sql: str, params: Any = ()) -> None:
        self._conn.executed.append((sql, list(params)))
        if self._conn.fail_with is not None and len(self._conn.executed) >= self._conn.fail_on_call:
            raise self._conn.fail_with
        # One "(%s" per VALUES tuple; reads report no affected rows.
        self.rowcount = sql.count("(%s") if sql.startswith("INSERT") else -1

    def fetchall(self) -> list[dict[str, Any]]:
        return list(self._conn.rows)

    def __exit__(self, exc_type, exc, tb) -> bool:
        del exc_type, exc, tb
        return False


class FakeTransaction(AbstractContextManager[None]):
    def __init__(self, conn: FakeConnection) -> None:
        self._conn = conn

    def __enter__(self) -> None:
        self._conn.transactions += 1
        return None

    def __exit__(self, exc_type, exc, tb) -> bool:
        del exc, tb
        if exc_type is None:
            self._conn.commits += 1
        else:
            self._conn.rollbacks += 1
        return False


class FakeConnection:
    def __init__(self) -> None:
        self.executed: list[tuple[str, list[Any]]] = []
        self.rows: list[dict[str, Any]] = []
        self.fail_with: BaseException | None = None
        self.fail_on_call = 1
        self.transactions = 0
        self.commits = 0
        self.rollbacks = 0
        self.row_factories: list[Any] = []

    def cursor(self, row_factory: Any = None) -> FakeCursor:
        self.row_factories.append(row_factory)
        return FakeCursor(self)

    def transaction(self) -> FakeTransaction:
        return FakeTransaction(self)


class _FakePoolConnectionContext(AbstractContextManager[FakeConnection]):
    def __init__(self, pool: FakePool) -> None:
        self._pool = pool

    def __enter__(self) -> FakeConnection:
        if self._pool.acquire_error is not None:
            raise self._pool.acquire_error
        self._pool.acquisitions += 1
        return self._pool.conn

    def __exit__(self, exc_type, exc, tb) -> bool:
        del exc_type, exc, tb
        return False


class FakePool:
    def __init__(self) -> None:
        self.conn = FakeConnection()
        self.acquisitions = 0
        self.acquire_error: BaseException | None = None

    def connection(self) -> _FakePoolConnectionContext:
        return _FakePoolConnectionContext(self)


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()
