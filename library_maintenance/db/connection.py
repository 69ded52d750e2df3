from __future__ import annotations

import logging
import os
from typing import Any

from psycopg_pool import ConnectionPool

from library_maintenance import config

logger = logging.getLogger(__name__)

# Pool configuration
_POOL_MIN_SIZE = int(os.environ.get("LIBRARY_DB_POOL_MIN", "1"))
_POOL_MAX_SIZE = int(os.environ.get("LIBRARY_DB_POOL_MAX", "10"))
_POOL_TIMEOUT = float(os.environ.get("LIBRARY_DB_POOL_TIMEOUT", "30"))
_POOL_MAX_IDLE = float(os.environ.get("LIBRARY_DB_POOL_MAX_IDLE", "300"))


def create_pool(conninfo: str | None = None) -> ConnectionPool:
    """Open a connection pool and make sure the database answers.

    Raises if the database cannot be reached, so the service refuses to
    start rather than failing on the first request.
    """
    pool = ConnectionPool(
        conninfo=conninfo or config.database_url(),
        min_size=_POOL_MIN_SIZE,
        max_size=_POOL_MAX_SIZE,
        timeout=_POOL_TIMEOUT,
        max_idle=_POOL_MAX_IDLE,
        open=True,
        check=ConnectionPool.check_connection,
    )

    try:
        ping(pool)
    except Exception:
        pool.close()
        raise

    logger.info(
        "Database connection pool initialized (min=%d, max=%d)",
        _POOL_MIN_SIZE,
        _POOL_MAX_SIZE,
    )
    return pool


def ping(pool: ConnectionPool) -> None:
    with pool.connection() as conn:
        conn.execute("SELECT 1")


def close_pool(pool: ConnectionPool) -> None:
    """Close the connection pool. Called at shutdown."""
    try:
        pool.close()
        logger.info("Database connection pool closed")
    except Exception as e:
        logger.warning("Error closing connection pool: %s", e)


def get_pool_stats(pool: ConnectionPool) -> dict[str, Any]:
    """Get connection pool statistics for monitoring."""
    stats = pool.get_stats()
    return {
        "pool_size": stats.get("pool_size", 0),
        "pool_available": stats.get("pool_available", 0),
        "requests_waiting": stats.get("requests_waiting", 0),
        "pool_min": pool.min_size,
        "pool_max": pool.max_size,
    }
