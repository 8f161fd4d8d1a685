from unittest import mock

import pytest
from fastapi.testclient import TestClient

from tunefinder import playback
from tunefinder.main import app
from tunefinder.session import SearchSession
from tunefinder.spotify_client import NetworkFailure

ITEM = {
    "name": "A",
    "duration_ms": 60000,
    "uri": "spotify:track:a",
    "album": {"name": "X", "uri": "spotify:album:x"},
    "artists": [{"name": "Artist1"}],
}

TRACK = {
    "name": "A",
    "duration_ms": 60000,
    "album_name": "X",
    "artist_names": ["Artist1"],
    "track_uri": "spotify:track:a",
    "album_uri": "spotify:album:x",
}


@pytest.fixture
def catalog():
    catalog = mock.Mock()
    catalog.search_tracks.return_value = {"tracks": {"items": [ITEM, dict(ITEM)]}}
    return catalog


@pytest.fixture
def client(catalog):
    with TestClient(app) as c:
        app.state.session = SearchSession(catalog, platform="linux")
        yield c


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "app": "tunefinder"}


def test_platform(client):
    body = client.get("/platform").json()
    assert body["platform"] == "linux"
    assert body["supported"] is True
    assert body["supported_platforms"] == ["darwin", "linux", "windows"]


def test_search_returns_deduplicated_candidates(client, catalog):
    body = client.get("/search", params={"q": "test"}).json()

    catalog.search_tracks.assert_called_once_with("test")
    assert len(body["candidates"]) == 1
    assert body["candidates"][0]["label"] == "A (1m00s) Artist1 - X"
    assert body["candidates"][0]["track"] == TRACK
    assert body["stale"] is False


def test_search_short_query_skips_catalog(client, catalog):
    body = client.get("/search", params={"q": "t"}).json()
    assert body["candidates"] == []
    catalog.search_tracks.assert_not_called()


def test_search_failure_renders_empty_list(client, catalog):
    catalog.search_tracks.side_effect = NetworkFailure("connection refused")
    response = client.get("/search", params={"q": "test"})
    assert response.status_code == 200
    assert response.json()["candidates"] == []
    assert response.json()["error"] == "connection refused"


def test_search_unknown_view_is_400(client):
    assert client.get("/search", params={"q": "test", "view": "genre"}).status_code == 400


def test_actions_menu(client):
    body = client.post("/actions", json=TRACK).json()
    assert body == {"actions": ["Play Track", "Play Album", "Show Metadata"]}


def test_play_album_action(client):
    with mock.patch.object(playback, "run_command") as run:
        body = client.post("/action", json={"action": "Play Album", "track": TRACK}).json()

    run.assert_called_once()
    assert run.call_args.args[0][-1] == "string:spotify:album:x"
    assert body["playback"]["dispatched"] is True


def test_show_metadata_action(client):
    body = client.post("/action", json={"action": "Show Metadata", "track": TRACK}).json()
    assert body["metadata"] == TRACK


def test_unknown_action_is_400(client):
    response = client.post("/action", json={"action": "Delete", "track": TRACK})
    assert response.status_code == 400


def test_play_uri_on_unsupported_platform(client):
    app.state.session.platform = "plan9"
    with mock.patch.object(playback, "run_command") as run:
        body = client.post("/play", json={"uri": "spotify:track:a"}).json()

    run.assert_not_called()
    assert body["dispatched"] is False
    assert body["notice"] == "Platform plan9 is not supported"


def test_play_uri_requires_uri(client):
    assert client.post("/play", json={"uri": "  "}).status_code == 400


def test_play_uri_refuses_injected_uri(client):
    with mock.patch.object(playback, "run_command") as run:
        body = client.post("/play", json={"uri": "spotify:track:a&calc"}).json()

    run.assert_not_called()
    assert body["dispatched"] is False
    assert "Not a playable Spotify URI" in body["notice"]
