"""
Caller-side retry policy for transient store failures.

The gateway never retries on its own. Jobs that want to ride out a database
restart wrap their calls with `retry_on_connectivity`; only
ConnectivityError is retried, every other StoreError surfaces immediately.

Usage:
    from tracker_store.retry import retry_on_connectivity

    retry_on_connectivity(client.insert_submissions, rows)
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from tracker_store.errors import ConnectivityError
from tracker_store.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")


def retry_on_connectivity(
    func: Callable[..., T],
    *args,
    attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 10.0,
    **kwargs,
) -> T:
    """
    Call `func(*args, **kwargs)`, retrying ConnectivityError with backoff.

    Re-raises the last ConnectivityError once `attempts` are exhausted.
    """
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(ConnectivityError),
        before_sleep=before_sleep_log(log, logging.WARNING),
        reraise=True,
    )
    return retrying(func, *args, **kwargs)


__all__ = ["retry_on_connectivity"]
