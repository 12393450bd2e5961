"""
Error taxonomy for the tracker store.

Every failure surfaced by the gateway is a StoreError. Callers distinguish
the three actionable kinds by subclass:

- ConnectivityError: the store is unreachable; safe to retry.
- ConstraintError: an integrity violation outside the documented conflict
  policies; a logic bug, never retried.
- MalformedInputError: the batch was rejected before or by the store because
  of invalid values; nothing was applied.
"""

from __future__ import annotations

from typing import Optional

import psycopg
from psycopg_pool import PoolClosed, PoolTimeout


class StoreError(Exception):
    """Base class for all persistence failures."""

    def __init__(self, message: str, operation: Optional[str] = None) -> None:
        super().__init__(message)
        self.operation = operation


class ConnectivityError(StoreError):
    """The store could not be reached or the connection was lost."""


class ConstraintError(StoreError):
    """An integrity constraint was violated."""


class MalformedInputError(StoreError):
    """Input rows failed validation; the batch was rejected wholesale."""


def translate_error(exc: BaseException, operation: str) -> StoreError:
    """
    Map a driver or pool exception to the matching StoreError subclass.

    The caller is expected to `raise translate_error(exc, op) from exc` so the
    original exception stays attached as `__cause__`.
    """
    message = f"{operation} failed: {exc}"
    if isinstance(exc, StoreError):
        return exc
    if isinstance(exc, (PoolTimeout, PoolClosed)):
        return ConnectivityError(message, operation)
    if isinstance(exc, psycopg.IntegrityError):
        return ConstraintError(message, operation)
    if isinstance(exc, psycopg.DataError):
        return MalformedInputError(message, operation)
    if isinstance(exc, (psycopg.OperationalError, psycopg.InterfaceError)):
        return ConnectivityError(message, operation)
    return StoreError(message, operation)


__all__ = [
    "ConnectivityError",
    "ConstraintError",
    "MalformedInputError",
    "StoreError",
    "translate_error",
]
