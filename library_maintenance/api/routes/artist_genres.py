"""
Artist genre routes.

Look up artists together with their genre tags, and add or remove tags
by genre name.
"""

from __future__ import annotations

import logging
from typing import Any

import psycopg
from fastapi import APIRouter, Depends, HTTPException
from psycopg_pool import ConnectionPool
from pydantic import BaseModel

from library_maintenance.api.dependencies import get_pool
from library_maintenance.api.routes.youtube import ArtistSearchRequest
from library_maintenance.db import library

router = APIRouter()
logger = logging.getLogger(__name__)


class GenreUpdateRequest(BaseModel):
    artist_id: int
    genre: str


@router.post("", response_model=list[library.ArtistGenres])
def search_artist_genres(
    request: ArtistSearchRequest,
    pool: ConnectionPool = Depends(get_pool),
):
    """Artists whose name contains the given text, with their genres."""
    try:
        return library.artist_genres(pool, request.artist)
    except psycopg.Error as e:
        logger.exception("Failed to look up artist genres")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/all", response_model=list[library.ArtistGenres])
def all_artist_genres(pool: ConnectionPool = Depends(get_pool)):
    try:
        return library.all_artist_genres(pool)
    except psycopg.Error as e:
        logger.exception("Failed to list artist genres")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/all/nogenre", response_model=list[library.ArtistGenres])
def untagged_artists(pool: ConnectionPool = Depends(get_pool)):
    """Artists that have no genre at all."""
    try:
        return library.untagged_artists(pool)
    except psycopg.Error as e:
        logger.exception("Failed to list untagged artists")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/deletebyname")
def delete_genre_by_name(
    request: GenreUpdateRequest,
    pool: ConnectionPool = Depends(get_pool),
) -> dict[str, Any]:
    """
    Remove a genre tag from an artist.

    Removing a tag the artist does not carry succeeds without changes.
    """
    try:
        library.remove_artist_genre(pool, request.artist_id, request.genre)
    except psycopg.Error as e:
        logger.exception("Failed to remove genre %r from artist %d", request.genre, request.artist_id)
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "updated"}


@router.post("/addbyname")
def add_genre_by_name(
    request: GenreUpdateRequest,
    pool: ConnectionPool = Depends(get_pool),
) -> dict[str, Any]:
    """
    Tag an artist with a genre, creating the genre if needed.

    Adding a tag the artist already carries succeeds without changes.
    """
    try:
        library.add_artist_genre(pool, request.artist_id, request.genre)
    except psycopg.Error as e:
        logger.exception("Failed to add genre %r to artist %d", request.genre, request.artist_id)
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "updated"}
