# backend/routes/playlist_routes.py
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status

from models.playlist import (
    PlaylistCreate,
    PlaylistEntryUpdate,
    PlaylistTrackAdd,
    PlaylistUpdate,
)
from repositories.playlist_repository import PlaylistRepository
from routes.dependencies import get_playlist_repository
import logging

router = APIRouter(prefix="/playlists", tags=["Playlists"])
LOG = logging.getLogger("routes.playlists")

# ============================================================
# 🔹 List playlists
# ============================================================
@router.get("", summary="List playlists, optionally by owner")
def list_playlists(
    owner: Optional[str] = Query(None, description="Only playlists of this owner"),
    playlists: PlaylistRepository = Depends(get_playlist_repository),
):
    return playlists.get_all_playlists(owner=owner)

# ============================================================
# 🔹 Get playlist by ID
# ============================================================
@router.get("/{playlist_id}", summary="Get playlist by ID (tracks resolved)")
def get_playlist(playlist_id: str, playlists: PlaylistRepository = Depends(get_playlist_repository)):
    LOG.info(f"🔎 Looking up playlist {playlist_id}")
    return playlists.get_playlist(playlist_id)

# ============================================================
# 🔹 Create playlist
# ============================================================
@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a playlist")
def create_playlist(data: PlaylistCreate, playlists: PlaylistRepository = Depends(get_playlist_repository)):
    return playlists.create_playlist(data)

# ============================================================
# 🔹 Update playlist
# ============================================================
@router.put("/{playlist_id}", summary="Update playlist details")
def update_playlist(
    playlist_id: str,
    data: PlaylistUpdate,
    playlists: PlaylistRepository = Depends(get_playlist_repository),
):
    return playlists.update_playlist(playlist_id, data)

# ============================================================
# 🔹 Delete playlist
# ============================================================
@router.delete("/{playlist_id}", summary="Delete a playlist and its entries")
def delete_playlist(playlist_id: str, playlists: PlaylistRepository = Depends(get_playlist_repository)):
    playlists.delete_playlist(playlist_id)
    return {"message": "Playlist deleted"}

# ============================================================
# 🔹 Tracks within a playlist
# ============================================================
@router.get("/{playlist_id}/tracks", summary="List the tracks of a playlist")
def list_playlist_tracks(playlist_id: str, playlists: PlaylistRepository = Depends(get_playlist_repository)):
    return playlists.get_entries(playlist_id)

@router.post(
    "/{playlist_id}/tracks",
    status_code=status.HTTP_201_CREATED,
    summary="Add a new or existing track to a playlist",
)
def add_playlist_track(
    playlist_id: str,
    payload: PlaylistTrackAdd = Body(...),
    playlists: PlaylistRepository = Depends(get_playlist_repository),
):
    """
    Two accepted bodies:
    - `{"trackId": "..."}` links an existing track.
    - `{"title": "...", "artist": "...", ...}` creates the track, then links it.
    """
    LOG.info(f"🎧 Adding track to playlist {playlist_id}")
    return playlists.add_track(playlist_id, payload)

@router.put("/{playlist_id}/tracks/{track_id}", summary="Update a track's order within a playlist")
def update_playlist_track(
    playlist_id: str,
    track_id: str,
    data: PlaylistEntryUpdate,
    playlists: PlaylistRepository = Depends(get_playlist_repository),
):
    return playlists.update_entry(playlist_id, track_id, data)

@router.delete("/{playlist_id}/tracks/{track_id}", summary="Remove a track from a playlist")
def remove_playlist_track(
    playlist_id: str,
    track_id: str,
    playlists: PlaylistRepository = Depends(get_playlist_repository),
):
    playlists.remove_entry(playlist_id, track_id)
    return {"message": "Track removed from playlist"}
