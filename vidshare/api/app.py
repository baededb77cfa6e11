import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vidshare.api.errors import register_exception_handlers
from vidshare.api.v1.endpoints.videos import router as video_router
from vidshare.config import Settings, load_settings
from vidshare.domain.repositories.media_host import MediaHost
from vidshare.domain.repositories.video_repository import VideoRepository
from vidshare.domain.validation import format_size

logger = logging.getLogger("vidshare")


def configure_logging(level: str = "INFO") -> None:
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)


def _build_video_repo(settings: Settings) -> VideoRepository:
    from vidshare.infrastructure.repositories.supabase_video_repository import SupabaseVideoRepository
    from vidshare.infrastructure.supabase_client import create_supabase_client

    return SupabaseVideoRepository(create_supabase_client(settings), table=settings.videos_table)


def _build_media_host(settings: Settings) -> MediaHost:
    from vidshare.infrastructure.google_client import create_storage_client
    from vidshare.infrastructure.storage_service import GCSMediaHost

    return GCSMediaHost(create_storage_client(settings), settings.media_bucket, settings.media_public_base_url)


def create_app(
    settings: Optional[Settings] = None,
    video_repo: Optional[VideoRepository] = None,
    media_host: Optional[MediaHost] = None,
) -> FastAPI:
    """
    Builds the API with explicit collaborators. Anything not passed in is
    constructed from settings (Supabase for records, Cloud Storage for media).
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Vidshare Backend API")
    app.state.settings = settings
    app.state.video_repo = video_repo or _build_video_repo(settings)
    app.state.media_host = media_host or _build_media_host(settings)

    @app.middleware("http")
    async def limit_request_body(request: Request, call_next):
        """Rejects oversized bodies from the declared length, before anything is read."""
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > settings.max_request_bytes:
            logger.warning("Rejected %s %s: body of %s bytes", request.method, request.url.path, length)
            return JSONResponse(
                status_code=413,
                content={
                    "message": f"Request body too large. Maximum size is {format_size(settings.max_request_bytes)}.",
                    "details": {"limit": settings.max_request_bytes, "received": int(length)},
                },
            )
        return await call_next(request)

    @app.middleware("http")
    async def log_request_time(request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time
        logger.info("%s %s -> %d in %.3fs", request.method, request.url.path, response.status_code, duration)
        return response

    # Added last so it wraps the middleware above and early 413s still carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials="*" not in settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(video_router, prefix="/api")

    @app.get("/")
    async def root():
        return {"status": "ok", "message": "Vidshare backend is running"}

    logger.info("Using media bucket %s and table %s", settings.media_bucket, settings.videos_table)
    return app
