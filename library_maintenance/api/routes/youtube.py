"""
YouTube source routes.

Search the library's tracks by artist and update the YouTube source of a
track, optionally queueing it for another download attempt.
"""

from __future__ import annotations

import logging
from typing import Any

import psycopg
from fastapi import APIRouter, Depends, HTTPException
from psycopg_pool import ConnectionPool
from pydantic import BaseModel

from library_maintenance.api.dependencies import get_pool
from library_maintenance.db import library

router = APIRouter()
logger = logging.getLogger(__name__)


class ArtistSearchRequest(BaseModel):
    artist: str = ""


class RetryRequest(BaseModel):
    track_mbid: str
    youtube_code: str = ""
    retry_download: bool = False


@router.post("/search", response_model=list[library.TrackResult])
def search_tracks(
    request: ArtistSearchRequest,
    pool: ConnectionPool = Depends(get_pool),
):
    """
    Find tracks by artist name.

    Case-insensitive substring match; results are ordered by artist,
    album and title.
    """
    try:
        return library.search_tracks(pool, request.artist)
    except psycopg.Error as e:
        logger.exception("Failed to search tracks")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/retry")
def retry_track(
    request: RetryRequest,
    pool: ConnectionPool = Depends(get_pool),
) -> dict[str, Any]:
    """
    Set a track's YouTube code.

    With ``retry_download`` the track is also queued for download again.
    """
    try:
        library.retry_track(
            pool,
            request.track_mbid,
            request.youtube_code,
            request.retry_download,
        )
    except psycopg.Error as e:
        logger.exception("Failed to update track %s", request.track_mbid)
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "updated"}
