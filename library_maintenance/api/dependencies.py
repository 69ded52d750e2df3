from __future__ import annotations

from fastapi import Request
from psycopg_pool import ConnectionPool


def get_pool(request: Request) -> ConnectionPool:
    """The connection pool owned by the running application."""
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise RuntimeError("Database connection pool is not initialized.")
    return pool
