from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn

from config import settings, Settings
from database.connection import get_music_db, close_db
from repositories.errors import PlaylistAPIError, describe_validation_error
from repositories.playback_repository import PlaybackRepository
from repositories.playlist_repository import PlaylistRepository
from repositories.track_repository import TrackRepository
from routes.playback_routes import router as playback_router
from routes.playlist_routes import router as playlist_router
from routes.track_routes import router as track_router

# =====================================================
# * Global logging configuration
# =====================================================
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)
logger = logging.getLogger("main")

DOCS_URL = "/api-docs"

SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}
CONTENT_SECURITY_POLICY = (
    "default-src 'self'; script-src 'self'; style-src 'self'; img-src 'self' data:; "
    "connect-src 'self'; object-src 'none'; base-uri 'self'"
)

# =====================================================
# * Exception handlers -> {"message": ...}
# =====================================================
async def api_error_handler(request: Request, exc: PlaylistAPIError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})

async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = describe_validation_error(exc)
    logger.warning(f"⚠️ Rejected input on {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"message": message})

async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
    # 500s are built outside the http middleware stack
    headers = dict(SECURITY_HEADERS)
    headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
    return JSONResponse(status_code=500, content={"message": "Internal server error"}, headers=headers)

# =====================================================
# * Application factory
# =====================================================
def create_app(db: Optional[Database] = None, app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API around one database handle.

    The three stores are constructed here, once, and handed to the route
    handlers through `app.state` (see routes.dependencies).
    """
    app_settings = app_settings or settings
    owns_db = db is None
    if owns_db:
        db = get_music_db(app_settings)

    tracks = TrackRepository(db)
    playlists = PlaylistRepository(
        db,
        tracks,
        renumber_on_remove=app_settings.RENUMBER_ON_REMOVE,
        require_owner=app_settings.REQUIRE_OWNER,
        write_retries=app_settings.PLAYLIST_WRITE_RETRIES,
    )
    playback = PlaybackRepository(db, tracks, require_owner=app_settings.REQUIRE_OWNER)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        for repo in (tracks, playlists, playback):
            repo.ensure_indexes()
        logger.info("✅ Database indexes ready, application started.")
        yield
        if owns_db:
            close_db(db)

    app = FastAPI(
        title=f"{app_settings.PROJECT_NAME}",
        description="Music playlists, tracks and playback state.",
        version=app_settings.VERSION,
        debug=app_settings.DEBUG,
        docs_url=DOCS_URL,
        lifespan=lifespan,
    )
    app.state.tracks = tracks
    app.state.playlists = playlists
    app.state.playback = playback

    # =====================================================
    # * CORS + security headers
    # =====================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        # Swagger UI pulls its assets from a CDN
        if not request.url.path.startswith(DOCS_URL):
            response.headers.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)
        return response

    app.add_exception_handler(PlaylistAPIError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # =====================================================
    # * Routers
    # =====================================================
    prefix = app_settings.API_PREFIX
    app.include_router(track_router, prefix=prefix)
    app.include_router(playlist_router, prefix=prefix)
    app.include_router(playback_router, prefix=prefix)

    logger.info("📜 Registered routers:")
    logger.info(f" - {prefix}/tracks -> TrackRouter")
    logger.info(f" - {prefix}/playlists -> PlaylistRouter")
    logger.info(f" - {prefix}/playback -> PlaybackRouter")

    @app.get("/", summary="Root route")
    def root():
        return {
            "message": f"✅ {app_settings.PROJECT_NAME} is running!",
            "version": app_settings.VERSION,
            "env": app_settings.ENV,
        }

    return app

app = create_app()

logger.info(f"🌍 {settings.PROJECT_NAME} backend initialised in '{settings.ENV}' mode.")

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=settings.DEBUG)
