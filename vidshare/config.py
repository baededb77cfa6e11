import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from vidshare.domain.validation import MB, UploadPolicy

# This points to the repository root (one level above the package)
BASE_DIR = Path(__file__).resolve().parent.parent

PROJECT_ROOT = Path(os.getenv("PROJECT_ROOT", str(BASE_DIR)))

DEFAULT_BUCKET = "vidshare-media"
DEFAULT_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, built once at startup and handed to create_app.
    """
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    videos_table: str = "videos"
    google_credentials_path: Path = PROJECT_ROOT / "key.json"
    media_bucket: str = DEFAULT_BUCKET
    media_public_base_url: Optional[str] = None
    max_video_bytes: int = 100 * MB
    max_thumbnail_bytes: int = 10 * MB
    max_request_bytes: int = 111 * MB
    cleanup_orphaned_media: bool = True
    cors_allow_origins: tuple[str, ...] = field(default=DEFAULT_ORIGINS)
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @property
    def upload_policy(self) -> UploadPolicy:
        return UploadPolicy(
            max_video_bytes=self.max_video_bytes,
            max_thumbnail_bytes=self.max_thumbnail_bytes,
        )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _media_bucket() -> str:
    # gs://bucket-name/folder/... -> bucket-name
    raw_uri = os.getenv("MEDIA_URI")
    if raw_uri and raw_uri.startswith("gs://"):
        return raw_uri.replace("gs://", "").split("/")[0]
    return os.getenv("MEDIA_BUCKET", DEFAULT_BUCKET)


def _credentials_path() -> Path:
    key_path = Path(os.getenv("GOOGLE_APPLICATION_CREDENTIALS", "key.json"))
    if not key_path.is_absolute():
        key_path = PROJECT_ROOT / key_path
    return key_path


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Reads the environment (after loading .env) into a Settings object.
    """
    load_dotenv(env_file or PROJECT_ROOT / ".env", override=False)

    url = os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL")
    key = (
        os.getenv("SUPABASE_KEY")
        or os.getenv("SUPABASE_ANON_KEY")
        or os.getenv("NEXT_PUBLIC_SUPABASE_ANON_KEY")
    )

    max_video = _int_env("MAX_VIDEO_BYTES", 100 * MB)
    max_thumbnail = _int_env("MAX_THUMBNAIL_BYTES", 10 * MB)
    origins = os.getenv("CORS_ALLOW_ORIGINS")

    return Settings(
        supabase_url=url,
        supabase_key=key,
        videos_table=os.getenv("VIDEOS_TABLE", "videos"),
        google_credentials_path=_credentials_path(),
        media_bucket=_media_bucket(),
        media_public_base_url=os.getenv("MEDIA_PUBLIC_BASE_URL") or None,
        max_video_bytes=max_video,
        max_thumbnail_bytes=max_thumbnail,
        max_request_bytes=_int_env("MAX_REQUEST_BYTES", max_video + max_thumbnail + MB),
        cleanup_orphaned_media=_bool_env("CLEANUP_ORPHANED_MEDIA", True),
        cors_allow_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) if origins else DEFAULT_ORIGINS,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int_env("PORT", 8000),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
