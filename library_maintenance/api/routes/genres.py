from __future__ import annotations

import logging

import psycopg
from fastapi import APIRouter, Depends, HTTPException
from psycopg_pool import ConnectionPool

from library_maintenance.api.dependencies import get_pool
from library_maintenance.db import library

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=list[library.Genre])
def list_genres(pool: ConnectionPool = Depends(get_pool)):
    try:
        return library.list_genres(pool)
    except psycopg.Error as e:
        logger.exception("Failed to list genres")
        raise HTTPException(status_code=500, detail=str(e))
