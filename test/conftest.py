"""
Shared fixtures: every test gets a fresh in-memory Mongo (mongomock)
injected into the app factory, so no server is needed.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app
from repositories.playback_repository import PlaybackRepository
from repositories.playlist_repository import PlaylistRepository
from repositories.track_repository import TrackRepository


def make_settings(**overrides) -> Settings:
    app_settings = Settings()
    app_settings.DEBUG = False
    app_settings.API_PREFIX = ""
    app_settings.REQUIRE_OWNER = False
    app_settings.RENUMBER_ON_REMOVE = True
    app_settings.PLAYLIST_WRITE_RETRIES = 5
    for key, value in overrides.items():
        setattr(app_settings, key, value)
    return app_settings


@pytest.fixture
def db():
    return mongomock.MongoClient()["musicdb_test"]


@pytest.fixture
def make_client(db):
    """Factory for clients with custom settings, e.g. make_client(REQUIRE_OWNER=True)."""
    opened = []

    def factory(**overrides) -> TestClient:
        app = create_app(db=db, app_settings=make_settings(**overrides))
        client = TestClient(app, raise_server_exceptions=False)
        client.__enter__()
        opened.append(client)
        return client

    yield factory
    for client in opened:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def track_repo(db):
    return TrackRepository(db)


@pytest.fixture
def playlist_repo(db, track_repo):
    return PlaylistRepository(db, track_repo)


@pytest.fixture
def playback_repo(db, track_repo):
    return PlaybackRepository(db, track_repo)


@pytest.fixture
def create_track(client):
    def _create(**fields):
        body = {"title": "Bohemian Rhapsody", "artist": "Queen"}
        body.update(fields)
        resp = client.post("/tracks", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _create


@pytest.fixture
def create_playlist(client):
    def _create(**fields):
        body = {"name": "Road Trip Mix"}
        body.update(fields)
        resp = client.post("/playlists", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _create
