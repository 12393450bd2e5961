"""
Infrastructure package for the tracker store.

Centralizes database connectivity concerns (pool lifecycle, one-off
connections) and the table definitions. Keep this layer focused on I/O and
resource management, decoupled from the gateway's statement logic.
"""

from tracker_store.infrastructure.db_factory import (
    PoolManager,
    get_sync_connection,
    get_sync_pool,
)
from tracker_store.infrastructure.schema import SCHEMA_SQL, TABLES, apply_schema

__all__ = [
    "PoolManager",
    "SCHEMA_SQL",
    "TABLES",
    "apply_schema",
    "get_sync_connection",
    "get_sync_pool",
]
