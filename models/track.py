# backend/models/track.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional

class Track(BaseModel):
    id: Optional[str] = None
    title: str
    artist: Optional[str] = None
    album: Optional[str] = None
    duration: Optional[int] = None  # duration in seconds
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None

class TrackCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: str = Field(..., min_length=1)
    artist: Optional[str] = None
    album: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)
    metadata: Optional[Dict[str, Any]] = None

class TrackUpdate(BaseModel):
    """Partial update: only the fields present in the body are written."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: Optional[str] = Field(None, min_length=1)
    artist: Optional[str] = None
    album: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, value):
        if value is None:
            raise ValueError("title cannot be null")
        return value
