# backend/routes/dependencies.py
from fastapi import Request

from repositories.playback_repository import PlaybackRepository
from repositories.playlist_repository import PlaylistRepository
from repositories.track_repository import TrackRepository

# Stores are built once in main.create_app and handed to handlers from app.state.

def get_track_repository(request: Request) -> TrackRepository:
    return request.app.state.tracks

def get_playlist_repository(request: Request) -> PlaylistRepository:
    return request.app.state.playlists

def get_playback_repository(request: Request) -> PlaybackRepository:
    return request.app.state.playback
