# backend/database/connection.py
import logging
from urllib.parse import quote_plus

from pymongo import MongoClient
from pymongo.database import Database

from config import settings, Settings

logger = logging.getLogger("database.connection")

# ============================================================
# 🔧 URI BUILDER
# ============================================================
def build_mongo_uri(app_settings: Settings = settings) -> str:
    """Full MONGO_URI wins; otherwise the URI is assembled from its parts."""
    if app_settings.MONGO_URI:
        return app_settings.MONGO_URI

    host = app_settings.MONGO_HOST
    port = app_settings.MONGO_PORT
    user = app_settings.MONGO_USER
    password = app_settings.MONGO_PASSWORD
    if user and password:
        return f"mongodb://{quote_plus(user)}:{quote_plus(password)}@{host}:{port}"
    return f"mongodb://{host}:{port}"

# ============================================================
# 🎵 MUSIC DATABASE CONNECTION
# ============================================================
def get_music_db(app_settings: Settings = settings) -> Database:
    """Create the client and return the music database handle.

    MongoClient connects lazily, so this never blocks on the server.
    """
    try:
        client = MongoClient(build_mongo_uri(app_settings))
        db = client[app_settings.MONGO_DB]
        logger.info(f"✅ Music database client ready: {app_settings.MONGO_DB}")
        return db
    except Exception as e:
        logger.error(f"❌ Error configuring MongoDB client ({app_settings.MONGO_DB}): {e}")
        raise e

# ============================================================
# 🔌 SHUTDOWN
# ============================================================
def close_db(db: Database) -> None:
    client = getattr(db, "client", None)
    if client is not None:
        client.close()
        logger.info("🔌 MongoDB client closed.")
