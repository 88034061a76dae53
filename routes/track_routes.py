# backend/routes/track_routes.py
from typing import List

from fastapi import APIRouter, Depends, status

from models.track import Track, TrackCreate, TrackUpdate
from repositories.playlist_repository import PlaylistRepository
from repositories.track_repository import TrackRepository
from routes.dependencies import get_playlist_repository, get_track_repository
import logging

router = APIRouter(prefix="/tracks", tags=["Tracks"])
logger = logging.getLogger("routes.tracks")

# ------------------------------------------------------------
# 🔹 List tracks
# ------------------------------------------------------------
@router.get("", response_model=List[Track], summary="Get all tracks")
def list_tracks(tracks: TrackRepository = Depends(get_track_repository)):
    return tracks.get_all_tracks()

# ------------------------------------------------------------
# 🔹 Get track by ID
# ------------------------------------------------------------
@router.get("/{track_id}", response_model=Track, summary="Get track by ID")
def get_track(track_id: str, tracks: TrackRepository = Depends(get_track_repository)):
    return tracks.get_track(track_id)

# ------------------------------------------------------------
# 🔹 Create track
# ------------------------------------------------------------
@router.post("", response_model=Track, status_code=status.HTTP_201_CREATED, summary="Create a new track")
def add_track(track: TrackCreate, tracks: TrackRepository = Depends(get_track_repository)):
    return tracks.create_track(track)

# ------------------------------------------------------------
# 🔹 Update track
# ------------------------------------------------------------
@router.put("/{track_id}", response_model=Track, summary="Update track details")
def edit_track(track_id: str, track: TrackUpdate, tracks: TrackRepository = Depends(get_track_repository)):
    return tracks.update_track(track_id, track)

# ------------------------------------------------------------
# 🔹 Delete track
# ------------------------------------------------------------
@router.delete("/{track_id}", summary="Delete a track")
def remove_track(
    track_id: str,
    tracks: TrackRepository = Depends(get_track_repository),
    playlists: PlaylistRepository = Depends(get_playlist_repository),
):
    """Deletes the track and unlinks it from every playlist holding it."""
    tracks.delete_track(track_id)
    cleaned = playlists.purge_track(track_id)
    logger.info(f"🗑️ Track {track_id} deleted ({cleaned} playlist(s) cleaned)")
    return {"message": "Track deleted", "playlists_updated": cleaned}
