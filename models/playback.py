# backend/models/playback.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class PlaybackCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    track_id: str = Field(..., alias="trackId")
    position: int = 0  # current position in seconds
    is_playing: bool = Field(True, alias="isPlaying")
    owner: Optional[str] = None

class PlaybackUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    position: Optional[int] = None
    is_playing: Optional[bool] = Field(None, alias="isPlaying")
    owner: Optional[str] = None
