"""
Library queries.

Each function runs a single parameterized statement against the pool.
Reads fetch the complete result set before mapping rows; writes run inside
``conn.transaction()`` so a failure rolls the whole statement back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from psycopg_pool import ConnectionPool

logger = logging.getLogger(__name__)

DOWNLOAD_STATUS_QUEUED = "queued"


@dataclass(frozen=True)
class TrackResult:
    track_id: int
    artist: str
    album: str
    album_mbid: str
    title: str
    track_mbid: str
    youtube_code: Optional[str]
    download_status: str
    file_path: Optional[str]


@dataclass(frozen=True)
class ArtistGenres:
    id: int
    name: str
    genres: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Genre:
    id: int
    name: str


def contains_pattern(text: str) -> str:
    """Wrap free text in LIKE wildcards.

    The text is passed through as is, so any ``%`` or ``_`` it holds act as
    wildcards too.
    """
    return f"%{text}%"


SEARCH_TRACKS_SQL = """
    SELECT
        t.id AS track_id,
        a.name AS artist,
        al.title AS album,
        al.mbid AS album_mbid,
        t.title,
        t.mbid AS track_mbid,
        t.youtube_code,
        t.download_status,
        t.file_path
    FROM tracks t
    JOIN album_tracks alt ON alt.track_id = t.id
    JOIN albums al ON al.id = alt.album_id
    JOIN artist_tracks art ON art.track_id = t.id
    JOIN artists a ON a.id = art.artist_id
    WHERE LOWER(a.name) LIKE LOWER(%s)
    ORDER BY a.name, al.title, t.title
"""

RETRY_TRACK_SQL = """
    UPDATE tracks
    SET youtube_code = %s,
        download_status = CASE
            WHEN %s THEN %s
            ELSE download_status
        END
    WHERE mbid = %s
"""

_ARTIST_GENRES_SELECT = """
    SELECT
        a.id,
        a.name,
        COALESCE(
            ARRAY_AGG(DISTINCT g.name ORDER BY g.name)
                FILTER (WHERE g.name IS NOT NULL),
            ARRAY[]::text[]
        ) AS genres
    FROM artists a
    LEFT JOIN artist_genres ag ON ag.artist_id = a.id
    LEFT JOIN genres g ON g.id = ag.genre_id
"""

ARTIST_GENRES_SQL = (
    _ARTIST_GENRES_SELECT
    + """
    WHERE LOWER(a.name) LIKE LOWER(%s)
    GROUP BY a.id, a.name
    ORDER BY a.name
"""
)

ALL_ARTIST_GENRES_SQL = (
    _ARTIST_GENRES_SELECT
    + """
    GROUP BY a.id, a.name
    ORDER BY a.name
"""
)

UNTAGGED_ARTISTS_SQL = """
    SELECT
        a.id,
        a.name,
        ARRAY[]::text[] AS genres
    FROM artists a
    WHERE NOT EXISTS (
        SELECT 1
        FROM artist_genres ag
        WHERE ag.artist_id = a.id
    )
    ORDER BY a.name
"""

REMOVE_ARTIST_GENRE_SQL = """
    DELETE FROM artist_genres ag
    USING genres g
    WHERE ag.artist_id = %s
      AND g.name = %s
      AND ag.genre_id = g.id
"""

# The no-op DO UPDATE makes RETURNING yield the id of an existing genre too.
ADD_ARTIST_GENRE_SQL = """
    WITH genre AS (
        INSERT INTO genres (name)
        VALUES (%(genre)s)
        ON CONFLICT (name) DO UPDATE
            SET name = EXCLUDED.name
        RETURNING id
    )
    INSERT INTO artist_genres (artist_id, genre_id)
    SELECT %(artist_id)s, id
    FROM genre
    ON CONFLICT DO NOTHING
"""

LIST_GENRES_SQL = """
    SELECT id, name
    FROM genres
    ORDER BY name
"""


def _fetch_all(pool: ConnectionPool, query: str, params: tuple = ()) -> list[tuple]:
    with pool.connection() as conn:
        with conn.cursor() as cur:
            cur.execute(query, params)
            return cur.fetchall()


def _execute_in_transaction(pool: ConnectionPool, query: str, params) -> int:
    with pool.connection() as conn:
        with conn.transaction():
            with conn.cursor() as cur:
                cur.execute(query, params)
                return cur.rowcount


def _artist_genres_from_rows(rows: list[tuple]) -> list[ArtistGenres]:
    return [
        ArtistGenres(id=row[0], name=row[1], genres=list(row[2] or []))
        for row in rows
    ]


def search_tracks(pool: ConnectionPool, artist: str) -> list[TrackResult]:
    """Tracks of every artist whose name contains ``artist``, ignoring case.

    A track credited to several artists or released on several albums
    comes back once per (track, album, artist) combination.
    """
    rows = _fetch_all(pool, SEARCH_TRACKS_SQL, (contains_pattern(artist),))
    return [
        TrackResult(
            track_id=row[0],
            artist=row[1],
            album=row[2],
            album_mbid=row[3],
            title=row[4],
            track_mbid=row[5],
            youtube_code=row[6],
            download_status=row[7],
            file_path=row[8],
        )
        for row in rows
    ]


def retry_track(
    pool: ConnectionPool,
    track_mbid: str,
    youtube_code: str,
    retry_download: bool,
) -> int:
    """Set a track's YouTube code and, when asked, queue it for download.

    ``download_status`` is only touched when ``retry_download`` is true.
    Returns the number of updated rows; an unknown mbid updates nothing.
    """
    updated = _execute_in_transaction(
        pool,
        RETRY_TRACK_SQL,
        (youtube_code, retry_download, DOWNLOAD_STATUS_QUEUED, track_mbid),
    )
    logger.info(
        "Updated %d track(s) for mbid=%s (retry_download=%s)",
        updated,
        track_mbid,
        retry_download,
    )
    return updated


def artist_genres(pool: ConnectionPool, artist: str) -> list[ArtistGenres]:
    rows = _fetch_all(pool, ARTIST_GENRES_SQL, (contains_pattern(artist),))
    return _artist_genres_from_rows(rows)


def all_artist_genres(pool: ConnectionPool) -> list[ArtistGenres]:
    return _artist_genres_from_rows(_fetch_all(pool, ALL_ARTIST_GENRES_SQL))


def untagged_artists(pool: ConnectionPool) -> list[ArtistGenres]:
    """Artists without a single genre tag."""
    return _artist_genres_from_rows(_fetch_all(pool, UNTAGGED_ARTISTS_SQL))


def remove_artist_genre(pool: ConnectionPool, artist_id: int, genre: str) -> int:
    """Drop the tag ``genre`` from an artist. The genre itself is kept."""
    removed = _execute_in_transaction(
        pool, REMOVE_ARTIST_GENRE_SQL, (artist_id, genre)
    )
    logger.info("Removed %d genre tag(s) %r from artist %d", removed, genre, artist_id)
    return removed


def add_artist_genre(pool: ConnectionPool, artist_id: int, genre: str) -> int:
    """Tag an artist with ``genre``, creating the genre when it is new.

    Idempotent: tagging twice leaves one genre row and one association.
    Genre creation and tagging commit or roll back together.
    """
    added = _execute_in_transaction(
        pool, ADD_ARTIST_GENRE_SQL, {"artist_id": artist_id, "genre": genre}
    )
    logger.info("Added %d genre tag(s) %r to artist %d", added, genre, artist_id)
    return added


def list_genres(pool: ConnectionPool) -> list[Genre]:
    return [Genre(id=row[0], name=row[1]) for row in _fetch_all(pool, LIST_GENRES_SQL)]
