# backend/models/playlist.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.track import TrackCreate

# Fields a caller may send to create a new track inline.
TRACK_DETAIL_FIELDS = ("title", "artist", "album", "duration", "metadata")


class PlaylistTrackEntry(BaseModel):
    track_id: str
    order: int
    added_at: str


class Playlist(BaseModel):
    """In-memory view of a playlist document."""

    id: str
    name: str
    description: Optional[str] = None
    owner: Optional[str] = None
    tracks: List[PlaylistTrackEntry] = []
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    version: int = 0

    @classmethod
    def from_doc(cls, doc: dict) -> "Playlist":
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name", ""),
            description=doc.get("description"),
            owner=doc.get("owner"),
            tracks=[PlaylistTrackEntry(**entry) for entry in doc.get("tracks", [])],
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
            version=doc.get("version", 0),
        )

    def entry_map(self) -> Dict[str, PlaylistTrackEntry]:
        """Entries keyed by track id; at most one entry per track."""
        return {entry.track_id: entry for entry in self.tracks}

    def ordered_entries(self) -> List[PlaylistTrackEntry]:
        return sorted(self.tracks, key=lambda e: e.order)

    def tracks_as_docs(self) -> List[dict]:
        return [entry.model_dump() for entry in self.tracks]


class PlaylistCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    owner: Optional[str] = None


class PlaylistUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    owner: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        if value is None:
            raise ValueError("name cannot be null")
        return value


class PlaylistTrackAdd(BaseModel):
    """
    Body of POST /playlists/{id}/tracks.

    Either `trackId` (link an existing track) or new track details
    (at least `title`) but never both.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    track_id: Optional[str] = Field(None, alias="trackId")
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    duration: Optional[Any] = None
    metadata: Optional[Any] = None

    def has_track_details(self) -> bool:
        return any(getattr(self, name) is not None for name in TRACK_DETAIL_FIELDS)

    def track_details(self) -> Dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in TRACK_DETAIL_FIELDS
            if getattr(self, name) is not None
        }

    def to_track_create(self) -> TrackCreate:
        return TrackCreate(**self.track_details())


class PlaylistEntryUpdate(BaseModel):
    """Only the relationship fields of an entry can change."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    order: Optional[int] = Field(None, ge=1)
    added_at: Optional[datetime] = Field(None, alias="addedAt")
