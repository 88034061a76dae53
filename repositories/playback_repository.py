# backend/repositories/playback_repository.py
from typing import Dict, List, Optional
import logging

from pymongo import ReturnDocument
from pymongo.database import Database

from models.playback import PlaybackCreate, PlaybackUpdate
from repositories.errors import NotFoundError, ValidationError
from repositories.track_repository import TrackRepository
from repositories.utils import parse_object_id, serialize_doc, utc_now

LOG = logging.getLogger("repositories.playback")


def serialize_playback(doc: dict, track: Optional[dict]) -> Optional[Dict]:
    record = serialize_doc(doc)
    if record is None:
        return None
    record.setdefault("owner", None)
    record["track"] = track
    return record


class PlaybackRepository:
    """Playback sessions; the most recent one is the last one updated."""

    def __init__(self, db: Database, tracks: TrackRepository, require_owner: bool = False):
        self.collection = db["playbacks"]
        self.tracks = tracks
        self.require_owner = require_owner

    def ensure_indexes(self):
        try:
            self.collection.create_index([("updated_at", -1)])
        except Exception as e:
            LOG.debug(f"⚠️ Could not create index 'updated_at': {e}")

    def _populate(self, doc: dict) -> Dict:
        return serialize_playback(doc, self.tracks.find_track(doc.get("track_id")))

    def get_latest(self) -> List[Dict]:
        """Zero or one record: the one with the newest `updated_at`."""
        cursor = self.collection.find().sort([("updated_at", -1), ("_id", -1)]).limit(1)
        return [self._populate(doc) for doc in cursor]

    def create_playback(self, data: PlaybackCreate) -> Dict:
        if parse_object_id(data.track_id) is None:
            raise ValidationError("Invalid trackId format.")
        if self.tracks.find_track(data.track_id) is None:
            raise ValidationError("trackId does not correspond to a track.")
        if self.require_owner and not data.owner:
            raise ValidationError("owner is required")

        now = utc_now()
        playback_doc = {
            "track_id": data.track_id,
            "position": data.position,
            "is_playing": data.is_playing,
            "owner": data.owner,
            "started_at": now,
            "updated_at": now,
        }
        result = self.collection.insert_one(playback_doc)
        LOG.info("Playback %s started for track %s", str(result.inserted_id), data.track_id)
        playback_doc["_id"] = result.inserted_id
        return self._populate(playback_doc)

    def update_playback(self, playback_id: str, data: PlaybackUpdate) -> Dict:
        changes = data.model_dump(exclude_unset=True)
        if "owner" in changes and self.require_owner and not changes["owner"]:
            raise ValidationError("owner is required")
        for field in ("position", "is_playing"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")

        oid = parse_object_id(playback_id)
        if oid is None:
            raise NotFoundError("Playback not found")

        changes["updated_at"] = utc_now()
        doc = self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise NotFoundError("Playback not found")
        return self._populate(doc)

    def delete_playback(self, playback_id: str) -> None:
        oid = parse_object_id(playback_id)
        if oid is None:
            raise NotFoundError("Playback not found")
        res = self.collection.delete_one({"_id": oid})
        if res.deleted_count == 0:
            raise NotFoundError("Playback not found")
        LOG.info("Playback record %s deleted", playback_id)
