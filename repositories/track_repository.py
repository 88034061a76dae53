# backend/repositories/track_repository.py
from typing import Dict, Iterable, List, Optional
import logging

from pymongo import ReturnDocument
from pymongo.database import Database

from models.track import TrackCreate, TrackUpdate
from repositories.errors import NotFoundError
from repositories.utils import parse_object_id, serialize_doc, utc_now

logger = logging.getLogger("repositories.tracks")

# ============================================================
# 🔹 Track serializer
# ============================================================
def serialize_track(doc: dict) -> Optional[Dict]:
    """Convert a Mongo document into a JSON serializable dict."""
    track = serialize_doc(doc)
    if track is None:
        return None
    for field in ("artist", "album", "duration", "metadata"):
        track.setdefault(field, None)
    return track


class TrackRepository:
    """Track Store: independent track records in the `tracks` collection."""

    def __init__(self, db: Database):
        self.collection = db["tracks"]

    def ensure_indexes(self):
        try:
            self.collection.create_index("created_at")
        except Exception as e:
            logger.debug(f"⚠️ Could not create index 'created_at': {e}")

    # ============================================================
    # 🔹 Read
    # ============================================================
    def get_all_tracks(self) -> List[Dict]:
        """All tracks, oldest first."""
        cursor = self.collection.find().sort("_id", 1)
        return [serialize_track(doc) for doc in cursor]

    def find_track(self, track_id: str) -> Optional[Dict]:
        """Track by id, or None when the id is malformed or unknown."""
        obj_id = parse_object_id(track_id)
        if obj_id is None:
            return None
        return serialize_track(self.collection.find_one({"_id": obj_id}))

    def get_track(self, track_id: str) -> Dict:
        track = self.find_track(track_id)
        if not track:
            logger.warning(f"❌ Track not found: {track_id}")
            raise NotFoundError("Track not found")
        return track

    def get_tracks_by_ids(self, track_ids: Iterable[str]) -> Dict[str, Dict]:
        """Bulk lookup used to populate references; unknown ids are absent."""
        obj_ids = [oid for oid in (parse_object_id(t) for t in set(track_ids)) if oid is not None]
        if not obj_ids:
            return {}
        cursor = self.collection.find({"_id": {"$in": obj_ids}})
        return {track["id"]: track for track in (serialize_track(doc) for doc in cursor)}

    # ============================================================
    # 🔹 Write
    # ============================================================
    def create_track(self, data: TrackCreate) -> Dict:
        track_doc = data.model_dump()
        track_doc["created_at"] = utc_now()
        result = self.collection.insert_one(track_doc)
        logger.info(f"✅ Track created: {data.title} ({result.inserted_id})")
        track_doc["_id"] = result.inserted_id
        return serialize_track(track_doc)

    def update_track(self, track_id: str, data: TrackUpdate) -> Dict:
        obj_id = parse_object_id(track_id)
        if obj_id is None:
            raise NotFoundError("Track not found")

        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return self.get_track(track_id)

        doc = self.collection.find_one_and_update(
            {"_id": obj_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            logger.warning(f"⚠️ Track not updated (missing): {track_id}")
            raise NotFoundError("Track not found")

        logger.info(f"📝 Track updated: {track_id} -> {sorted(changes)}")
        return serialize_track(doc)

    def delete_track(self, track_id: str) -> None:
        obj_id = parse_object_id(track_id)
        if obj_id is None:
            raise NotFoundError("Track not found")

        result = self.collection.delete_one({"_id": obj_id})
        if result.deleted_count == 0:
            logger.warning(f"⚠️ No track to delete: {track_id}")
            raise NotFoundError("Track not found")
        logger.info(f"🗑️ Track deleted: {track_id}")
