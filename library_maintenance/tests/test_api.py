"""Tests for the HTTP contract of the library routes."""

from __future__ import annotations

import psycopg
import pytest
from fastapi.testclient import TestClient

from library_maintenance.api.app import create_app
from library_maintenance.db import library


@pytest.fixture
def pool():
    return object()


@pytest.fixture
def client(pool):
    with TestClient(create_app(pool=pool)) as test_client:
        yield test_client


def _track(**overrides):
    values = {
        "track_id": 7,
        "artist": "Radiohead",
        "album": "OK Computer",
        "album_mbid": "b1392450",
        "title": "Airbag",
        "track_mbid": "t-airbag",
        "youtube_code": None,
        "download_status": "pending",
        "file_path": None,
    }
    values.update(overrides)
    return library.TrackResult(**values)


def test_search_returns_tracks_with_null_optionals(client, pool, monkeypatch):
    calls = []

    def fake_search(used_pool, artist):
        calls.append((used_pool, artist))
        return [_track(), _track(track_id=8, title="Lucky", youtube_code="abc123")]

    monkeypatch.setattr(library, "search_tracks", fake_search)

    response = client.post("/youtube/search", json={"artist": "radio"})

    assert response.status_code == 200
    body = response.json()
    assert calls == [(pool, "radio")]
    assert [row["title"] for row in body] == ["Airbag", "Lucky"]
    assert body[0]["youtube_code"] is None
    assert body[0]["file_path"] is None
    assert body[1]["youtube_code"] == "abc123"
    assert set(body[0]) == {
        "track_id",
        "artist",
        "album",
        "album_mbid",
        "title",
        "track_mbid",
        "youtube_code",
        "download_status",
        "file_path",
    }


def test_search_without_artist_matches_everything(client, monkeypatch):
    seen = []
    monkeypatch.setattr(library, "search_tracks", lambda _pool, artist: seen.append(artist) or [])

    response = client.post("/youtube/search", json={})

    assert response.status_code == 200
    assert response.json() == []
    assert seen == [""]


def test_malformed_json_is_a_client_error(client):
    response = client.post(
        "/youtube/search",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert isinstance(response.json(), str)
    assert response.json()


def test_missing_body_is_a_client_error(client):
    response = client.post("/artistgenres/addbyname")

    assert response.status_code == 400


def test_store_failure_is_a_server_error_with_message(client, monkeypatch):
    def failing_search(_pool, _artist):
        raise psycopg.OperationalError("connection refused")

    monkeypatch.setattr(library, "search_tracks", failing_search)

    response = client.post("/youtube/search", json={"artist": "x"})

    assert response.status_code == 500
    assert response.json() == "connection refused"


def test_retry_passes_flags_and_acknowledges(client, pool, monkeypatch):
    calls = []
    monkeypatch.setattr(
        library,
        "retry_track",
        lambda *args: calls.append(args) or 1,
    )

    response = client.post(
        "/youtube/retry",
        json={"track_mbid": "t-airbag", "youtube_code": "dQw4w9WgXcQ", "retry_download": True},
    )

    assert response.status_code == 200
    assert response.json() == {"status": "updated"}
    assert calls == [(pool, "t-airbag", "dQw4w9WgXcQ", True)]


def test_retry_defaults_to_not_requeueing(client, pool, monkeypatch):
    calls = []
    monkeypatch.setattr(library, "retry_track", lambda *args: calls.append(args) or 0)

    response = client.post("/youtube/retry", json={"track_mbid": "unknown"})

    assert response.status_code == 200
    assert response.json() == {"status": "updated"}
    assert calls == [(pool, "unknown", "", False)]


def test_retry_requires_track_mbid(client):
    response = client.post("/youtube/retry", json={"youtube_code": "abc"})

    assert response.status_code == 400
    assert "track_mbid" in response.json()


def test_retry_store_failure(client, monkeypatch):
    def failing_retry(*_args):
        raise psycopg.errors.QueryCanceled("canceling statement due to statement timeout")

    monkeypatch.setattr(library, "retry_track", failing_retry)

    response = client.post("/youtube/retry", json={"track_mbid": "t"})

    assert response.status_code == 500
    assert "statement timeout" in response.json()


def test_artist_genres_filtered(client, pool, monkeypatch):
    calls = []

    def fake_lookup(used_pool, artist):
        calls.append((used_pool, artist))
        return [
            library.ArtistGenres(id=1, name="Björk", genres=["Electronic", "Pop"]),
            library.ArtistGenres(id=2, name="Bjørn", genres=[]),
        ]

    monkeypatch.setattr(library, "artist_genres", fake_lookup)

    response = client.post("/artistgenres", json={"artist": "bj"})

    assert response.status_code == 200
    assert calls == [(pool, "bj")]
    assert response.json() == [
        {"id": 1, "name": "Björk", "genres": ["Electronic", "Pop"]},
        {"id": 2, "name": "Bjørn", "genres": []},
    ]


def test_all_artist_genres_takes_no_body(client, monkeypatch):
    monkeypatch.setattr(
        library,
        "all_artist_genres",
        lambda _pool: [library.ArtistGenres(id=3, name="Can", genres=["Krautrock"])],
    )

    response = client.post("/artistgenres/all")

    assert response.status_code == 200
    assert response.json() == [{"id": 3, "name": "Can", "genres": ["Krautrock"]}]


def test_untagged_artists_have_empty_genre_lists(client, monkeypatch):
    monkeypatch.setattr(
        library,
        "untagged_artists",
        lambda _pool: [library.ArtistGenres(id=4, name="Neu!")],
    )

    response = client.post("/artistgenres/all/nogenre")

    assert response.status_code == 200
    assert response.json() == [{"id": 4, "name": "Neu!", "genres": []}]


@pytest.mark.parametrize(
    ("path", "function_name"),
    [
        ("/artistgenres/addbyname", "add_artist_genre"),
        ("/artistgenres/deletebyname", "remove_artist_genre"),
    ],
)
def test_genre_tag_mutations(client, pool, monkeypatch, path, function_name):
    calls = []
    monkeypatch.setattr(library, function_name, lambda *args: calls.append(args) or 0)

    response = client.post(path, json={"artist_id": "12", "genre": "Jazz"})

    assert response.status_code == 200
    assert response.json() == {"status": "updated"}
    assert calls == [(pool, 12, "Jazz")]


@pytest.mark.parametrize(
    "payload",
    [
        {"genre": "Jazz"},
        {"artist_id": "twelve", "genre": "Jazz"},
        {"artist_id": 12},
    ],
)
def test_genre_tag_mutations_validate_body(client, payload):
    response = client.post("/artistgenres/addbyname", json=payload)

    assert response.status_code == 400
    assert isinstance(response.json(), str)


def test_removing_an_empty_genre_name_is_a_no_op(client, pool, monkeypatch):
    calls = []
    monkeypatch.setattr(library, "remove_artist_genre", lambda *args: calls.append(args) or 0)

    response = client.post("/artistgenres/deletebyname", json={"artist_id": 1, "genre": ""})

    assert response.status_code == 200
    assert response.json() == {"status": "updated"}
    assert calls == [(pool, 1, "")]


def test_artist_genre_search_defaults_to_every_artist(client, pool, monkeypatch):
    calls = []
    monkeypatch.setattr(library, "artist_genres", lambda *args: calls.append(args) or [])

    response = client.post("/artistgenres", json={})

    assert response.status_code == 200
    assert response.json() == []
    assert calls == [(pool, "")]


def test_add_genre_store_failure(client, monkeypatch):
    def failing_add(*_args):
        raise psycopg.errors.ForeignKeyViolation("violates foreign key constraint")

    monkeypatch.setattr(library, "add_artist_genre", failing_add)

    response = client.post("/artistgenres/addbyname", json={"artist_id": 999, "genre": "Jazz"})

    assert response.status_code == 500
    assert response.json() == "violates foreign key constraint"


def test_list_genres(client, monkeypatch):
    monkeypatch.setattr(
        library,
        "list_genres",
        lambda _pool: [library.Genre(id=1, name="Ambient"), library.Genre(id=2, name="Jazz")],
    )

    response = client.post("/genres")

    assert response.status_code == 200
    assert response.json() == [{"id": 1, "name": "Ambient"}, {"id": 2, "name": "Jazz"}]


def test_health_reports_degraded_pool(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"


def test_root_banner(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Library Maintenance API"
