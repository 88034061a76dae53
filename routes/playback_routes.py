# backend/routes/playback_routes.py
from fastapi import APIRouter, Depends, status

from models.playback import PlaybackCreate, PlaybackUpdate
from repositories.playback_repository import PlaybackRepository
from routes.dependencies import get_playback_repository

router = APIRouter(prefix="/playback", tags=["Playback"])

# ------------------------------------------------------------
# 🔹 Last played track
# ------------------------------------------------------------
@router.get("", summary="Most recently updated playback record")
def last_playback(playback: PlaybackRepository = Depends(get_playback_repository)):
    """Returns a list holding zero or one record."""
    return playback.get_latest()

@router.post("", status_code=status.HTTP_201_CREATED, summary="Save a new playback record")
def create_playback(data: PlaybackCreate, playback: PlaybackRepository = Depends(get_playback_repository)):
    return playback.create_playback(data)

@router.put("/{playback_id}", summary="Update playback info")
def update_playback(
    playback_id: str,
    data: PlaybackUpdate,
    playback: PlaybackRepository = Depends(get_playback_repository),
):
    return playback.update_playback(playback_id, data)

@router.delete("/{playback_id}", summary="Delete a playback record")
def delete_playback(playback_id: str, playback: PlaybackRepository = Depends(get_playback_repository)):
    playback.delete_playback(playback_id)
    return {"message": "Playback record deleted"}
