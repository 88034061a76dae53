# backend/repositories/playlist_repository.py
from typing import Any, Callable, Dict, List, Optional, TypeVar
import logging

from pydantic import ValidationError as PydanticValidationError
from pymongo import ReturnDocument
from pymongo.database import Database

from models.playlist import (
    Playlist,
    PlaylistCreate,
    PlaylistEntryUpdate,
    PlaylistTrackAdd,
    PlaylistTrackEntry,
    PlaylistUpdate,
)
from repositories.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    validation_error_from,
)
from repositories.track_repository import TrackRepository
from repositories.utils import parse_object_id, to_iso, utc_now

logger = logging.getLogger("repositories.playlists")

T = TypeVar("T")

# ============================================================
# 🔹 Playlist serializer
# ============================================================
def serialize_entry(entry: PlaylistTrackEntry, track: Optional[dict]) -> dict:
    return {
        "track_id": entry.track_id,
        "order": entry.order,
        "added_at": entry.added_at,
        "track": track,
    }


def serialize_playlist(playlist: Playlist, tracks_by_id: Dict[str, dict]) -> dict:
    """Playlist ready for the JSON API, entries populated with their tracks."""
    entries = []
    for entry in playlist.ordered_entries():
        track = tracks_by_id.get(entry.track_id)
        if track is None:
            logger.warning(f"⚠️ Skipping unresolved track {entry.track_id} in playlist {playlist.id}")
            continue
        entries.append(serialize_entry(entry, track))

    return {
        "id": playlist.id,
        "name": playlist.name,
        "description": playlist.description,
        "owner": playlist.owner,
        "created_at": playlist.created_at,
        "updated_at": playlist.updated_at,
        "version": playlist.version,
        "total_tracks": len(entries),
        "tracks": entries,
    }


class PlaylistRepository:
    """
    Playlist Store plus the playlist-track linking operations.

    Entry mutations are read-modify-write cycles guarded by the document
    `version`: a write only lands if nobody else wrote in between, otherwise
    the whole cycle is replayed from a fresh read.
    """

    def __init__(
        self,
        db: Database,
        tracks: TrackRepository,
        renumber_on_remove: bool = True,
        require_owner: bool = False,
        write_retries: int = 5,
    ):
        self.collection = db["playlists"]
        self.tracks = tracks
        self.renumber_on_remove = renumber_on_remove
        self.require_owner = require_owner
        self.write_retries = max(1, write_retries)

    def ensure_indexes(self):
        for key in ("owner", "tracks.track_id"):
            try:
                self.collection.create_index(key)
            except Exception as e:
                logger.debug(f"⚠️ Could not create index '{key}': {e}")

    # ============================================================
    # 🔹 Internal helpers
    # ============================================================
    def _load(self, playlist_id: str) -> Playlist:
        obj_id = parse_object_id(playlist_id)
        doc = self.collection.find_one({"_id": obj_id}) if obj_id is not None else None
        if not doc:
            logger.info(f"❌ Playlist not found with ID {playlist_id}")
            raise NotFoundError("Playlist not found")
        return Playlist.from_doc(doc)

    def _save_entries(self, playlist: Playlist) -> bool:
        """Conditional write of the entries; False when the version is stale."""
        result = self.collection.update_one(
            {"_id": parse_object_id(playlist.id), "version": playlist.version},
            {
                "$set": {"tracks": playlist.tracks_as_docs(), "updated_at": utc_now()},
                "$inc": {"version": 1},
            },
        )
        return result.matched_count == 1

    def _mutate(self, playlist_id: str, mutation: Callable[[Playlist], T]) -> T:
        for attempt in range(1, self.write_retries + 1):
            playlist = self._load(playlist_id)
            outcome = mutation(playlist)
            if self._save_entries(playlist):
                return outcome
            logger.warning(
                f"🔁 Stale write on playlist {playlist_id} (attempt {attempt}/{self.write_retries})"
            )
        raise ConflictError("Playlist was modified concurrently, please retry.")

    def _populate(self, playlists: List[Playlist]) -> List[dict]:
        track_ids = [entry.track_id for p in playlists for entry in p.tracks]
        tracks_by_id = self.tracks.get_tracks_by_ids(track_ids)
        return [serialize_playlist(p, tracks_by_id) for p in playlists]

    def _check_owner(self, owner: Optional[str]):
        if self.require_owner and not owner:
            raise ValidationError("owner is required")

    # ============================================================
    # 🔹 Playlists
    # ============================================================
    def get_all_playlists(self, owner: Optional[str] = None) -> List[dict]:
        query = {"owner": owner} if owner else {}
        cursor = self.collection.find(query).sort("_id", 1)
        playlists = [Playlist.from_doc(doc) for doc in cursor]
        logger.info(f"📜 Fetched {len(playlists)} playlists (owner={owner}).")
        return self._populate(playlists)

    def get_playlist(self, playlist_id: str) -> dict:
        return self._populate([self._load(playlist_id)])[0]

    def create_playlist(self, data: PlaylistCreate) -> dict:
        self._check_owner(data.owner)
        now = utc_now()
        playlist_doc = {
            "name": data.name,
            "description": data.description,
            "owner": data.owner,
            "tracks": [],
            "created_at": now,
            "updated_at": now,
            "version": 0,
        }
        result = self.collection.insert_one(playlist_doc)
        logger.info(f"✅ Playlist created: {data.name} ({result.inserted_id})")
        playlist_doc["_id"] = result.inserted_id
        return serialize_playlist(Playlist.from_doc(playlist_doc), {})

    def update_playlist(self, playlist_id: str, data: PlaylistUpdate) -> dict:
        """Update top-level fields; entries are only touched by the linking operations."""
        changes = data.model_dump(exclude_unset=True)
        if "owner" in changes:
            self._check_owner(changes["owner"])

        obj_id = parse_object_id(playlist_id)
        if obj_id is None:
            raise NotFoundError("Playlist not found")

        changes["updated_at"] = utc_now()
        doc = self.collection.find_one_and_update(
            {"_id": obj_id},
            {"$set": changes, "$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            logger.warning(f"⚠️ Playlist not updated (missing): {playlist_id}")
            raise NotFoundError("Playlist not found")

        logger.info(f"📝 Playlist updated: {playlist_id}")
        return self._populate([Playlist.from_doc(doc)])[0]

    def delete_playlist(self, playlist_id: str) -> None:
        obj_id = parse_object_id(playlist_id)
        if obj_id is None:
            raise NotFoundError("Playlist not found")

        result = self.collection.delete_one({"_id": obj_id})
        if result.deleted_count == 0:
            logger.warning(f"⚠️ No playlist to delete: {playlist_id}")
            raise NotFoundError("Playlist not found")
        logger.info(f"🗑️ Playlist deleted: {playlist_id}")

    # ============================================================
    # 🔹 Playlist entries
    # ============================================================
    def get_entries(self, playlist_id: str) -> List[dict]:
        return self.get_playlist(playlist_id)["tracks"]

    def _resolve_track(self, payload: PlaylistTrackAdd):
        """Return (track, created) for the two accepted input shapes."""
        has_details = payload.has_track_details()
        has_reference = payload.track_id is not None

        if has_details and has_reference:
            raise ValidationError(
                "Cannot provide both track details (like title) and an existing trackId."
            )
        if not has_details and not has_reference:
            raise ValidationError(
                "Missing trackId (to add existing) or track details (like title) to create a new track."
            )

        if has_reference:
            if parse_object_id(payload.track_id) is None:
                raise ValidationError("Invalid existing trackId format.")
            track = self.tracks.find_track(payload.track_id)
            if not track:
                raise NotFoundError("The existing trackId provided does not correspond to a track.")
            return track, False

        try:
            new_track = payload.to_track_create()
        except PydanticValidationError as e:
            raise validation_error_from(e)
        return self.tracks.create_track(new_track), True

    def add_track(self, playlist_id: str, payload: PlaylistTrackAdd) -> Dict[str, Any]:
        """Link an existing track or create-and-link a new one, appended at the end."""
        self._load(playlist_id)
        track, created = self._resolve_track(payload)
        track_id = track["id"]

        def append(playlist: Playlist) -> PlaylistTrackEntry:
            if track_id in playlist.entry_map():
                raise ConflictError("Track already exists in this playlist.")
            last_order = max((e.order for e in playlist.tracks), default=0)
            entry = PlaylistTrackEntry(
                track_id=track_id,
                order=max(len(playlist.tracks), last_order) + 1,
                added_at=utc_now(),
            )
            playlist.tracks.append(entry)
            return entry

        try:
            entry = self._mutate(playlist_id, append)
        except Exception:
            if created:
                # Undo the inline creation so no unlinked track is left behind.
                logger.warning(f"↩️ Rolling back track {track_id} created for playlist {playlist_id}")
                self.tracks.delete_track(track_id)
            raise

        logger.info(f"➕ Track {track_id} linked to playlist {playlist_id} at order {entry.order}")
        return {
            "message": "Track successfully added/created and linked to playlist.",
            "track": track,
        }

    def update_entry(self, playlist_id: str, track_id: str, data: PlaylistEntryUpdate) -> Dict[str, Any]:
        def apply(playlist: Playlist) -> PlaylistTrackEntry:
            entry = playlist.entry_map().get(track_id)
            if entry is None:
                raise NotFoundError("Track not found in playlist")
            if data.order is not None:
                # a new order is a move; positions past the end clamp to last
                others = [e for e in playlist.ordered_entries() if e.track_id != track_id]
                position = min(data.order, len(others) + 1)
                others.insert(position - 1, entry)
                for order, moved in enumerate(others, start=1):
                    moved.order = order
                playlist.tracks = others
            if data.added_at is not None:
                entry.added_at = to_iso(data.added_at)
            return entry

        entry = self._mutate(playlist_id, apply)
        logger.info(f"📝 Entry {track_id} updated in playlist {playlist_id}")
        return {
            "message": "Track item updated within playlist.",
            "updated_track_item": serialize_entry(entry, self.tracks.find_track(track_id)),
        }

    def remove_entry(self, playlist_id: str, track_id: str) -> None:
        def drop(playlist: Playlist) -> None:
            if track_id not in playlist.entry_map():
                raise NotFoundError("Track not found in playlist or trackId was invalid.")
            remaining = [e for e in playlist.ordered_entries() if e.track_id != track_id]
            if self.renumber_on_remove:
                for position, entry in enumerate(remaining, start=1):
                    entry.order = position
            playlist.tracks = remaining

        self._mutate(playlist_id, drop)
        logger.info(f"➖ Track {track_id} removed from playlist {playlist_id}")

    def purge_track(self, track_id: str) -> int:
        """Remove a deleted track from every playlist that still links it."""
        cleaned = 0
        for doc in self.collection.find({"tracks.track_id": track_id}, {"_id": 1}):
            try:
                self.remove_entry(str(doc["_id"]), track_id)
                cleaned += 1
            except NotFoundError:
                # playlist or entry vanished in the meantime
                continue
        if cleaned:
            logger.info(f"🧹 Track {track_id} removed from {cleaned} playlist(s)")
        return cleaned
