# backend/repositories/utils.py
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId


def utc_now() -> str:
    """ISO-8601 UTC timestamp; fixed width so lexical order is time order."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_object_id(value) -> Optional[ObjectId]:
    """ObjectId for a well formed id, None otherwise."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Mongo document -> JSON ready dict with `id` as string."""
    if not doc:
        return None
    out = dict(doc)
    out["id"] = str(out.pop("_id"))
    return out
