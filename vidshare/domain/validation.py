from dataclasses import dataclass, field
from typing import Optional

from vidshare.domain.entities.media import FilePayload, MediaFiles
from vidshare.domain.errors import ValidationError, Violation

MB = 1024 * 1024

TITLE_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200

IMAGE_CONTENT_TYPES = frozenset({"image/jpeg", "image/png"})
VIDEO_CONTENT_TYPES = frozenset({
    "video/mp4",
    "video/avi",
    "video/x-msvideo",
    "video/mpeg",
    "video/quicktime",
})


@dataclass(frozen=True)
class UploadPolicy:
    """
    Limits applied to every submission, both by the API and by the client form.
    """
    max_video_bytes: int = 100 * MB
    max_thumbnail_bytes: int = 10 * MB
    title_max_length: int = TITLE_MAX_LENGTH
    description_max_length: int = DESCRIPTION_MAX_LENGTH
    video_content_types: frozenset = field(default=VIDEO_CONTENT_TYPES)
    thumbnail_content_types: frozenset = field(default=IMAGE_CONTENT_TYPES)


def format_size(n: int) -> str:
    if n >= MB:
        return f"{n // MB}MB" if n % MB == 0 else f"{n / MB:.1f}MB"
    return f"{n} bytes"


def normalize_content_type(content_type: Optional[str]) -> str:
    # "Video/MP4; codecs=avc1" -> "video/mp4"
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def _check_text(name: str, value: Optional[str], max_length: int) -> list[Violation]:
    if value is None or not value.strip():
        return [Violation(name, "required", f"{name.capitalize()} is required")]
    if len(value) > max_length:
        return [Violation(name, "too_long", f"{name.capitalize()} must be at most {max_length} characters")]
    return []


def _check_file(name: str, payload: Optional[FilePayload], allowed: frozenset, max_bytes: int, label: str) -> list[Violation]:
    if payload is None or payload.size_bytes <= 0:
        return [Violation(name, "required", f"A {name} file is required")]

    violations = []
    if normalize_content_type(payload.content_type) not in allowed:
        violations.append(Violation(
            name,
            "unsupported_type",
            f"Invalid {name} format. Only {label} are allowed.",
        ))
    if payload.size_bytes > max_bytes:
        violations.append(Violation(
            name,
            "too_large",
            f"{name.capitalize()} exceeds the maximum size of {format_size(max_bytes)}",
        ))
    return violations


def validate_upload(title: Optional[str], description: Optional[str], files: MediaFiles, policy: UploadPolicy) -> list[Violation]:
    """
    Returns every violated constraint for a submission, in field order.
    An empty list means the submission may be sent to the media host.
    """
    violations = []
    violations += _check_text("title", title, policy.title_max_length)
    violations += _check_text("description", description, policy.description_max_length)
    violations += _check_file("thumbnail", files.thumbnail, policy.thumbnail_content_types, policy.max_thumbnail_bytes, "JPG and PNG")
    violations += _check_file("video", files.video, policy.video_content_types, policy.max_video_bytes, "MP4, AVI, MPEG and MOV")
    return violations


def ensure_valid_upload(title: Optional[str], description: Optional[str], files: MediaFiles, policy: UploadPolicy) -> None:
    violations = validate_upload(title, description, files, policy)
    if violations:
        raise ValidationError(violations)
