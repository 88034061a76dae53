# backend/config.py
import os
from dotenv import load_dotenv
from pathlib import Path

# ============================================================
# 🌍 DETECT ENVIRONMENT AND LOAD MATCHING .env
# ============================================================
ENV = os.getenv("ENV", "production" if "PASSENGER_ENV" in os.environ else "development")

env_file = ".env.production" if ENV == "production" else ".env.development"
dotenv_path = Path(__file__).resolve().parent / env_file
load_dotenv(dotenv_path)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ============================================================
# ⚙️ GENERAL SETTINGS
# ============================================================
class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Playlist API")
    VERSION: str = os.getenv("VERSION", "1.0.0")

    # 🔹 Mongo (music data)
    MONGO_URI: str = os.getenv("MONGO_URI") or os.getenv("MONGODB_URI")
    MONGO_USER: str = os.getenv("MONGO_USER")
    MONGO_PASSWORD: str = os.getenv("MONGO_PASSWORD")
    MONGO_HOST: str = os.getenv("MONGO_HOST", "localhost")
    MONGO_PORT: str = os.getenv("MONGO_PORT", "27017")
    MONGO_DB: str = os.getenv("MONGO_DB", "musicdb")

    # 🔹 HTTP surface
    ALLOWED_ORIGINS: list = os.getenv("ALLOWED_ORIGINS", "*").split(",")
    API_PREFIX: str = os.getenv("API_PREFIX", "").rstrip("/")
    PORT: int = int(os.getenv("PORT", "8000"))

    # 🔹 Domain policies
    REQUIRE_OWNER: bool = _env_flag("REQUIRE_OWNER", False)
    RENUMBER_ON_REMOVE: bool = _env_flag("RENUMBER_ON_REMOVE", True)
    PLAYLIST_WRITE_RETRIES: int = int(os.getenv("PLAYLIST_WRITE_RETRIES", "5"))

    # 🔹 Others
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    DEBUG: bool = ENV == "development"
    ENV: str = ENV

settings = Settings()
