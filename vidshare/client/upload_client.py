import io
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union

import requests
from urllib3 import encode_multipart_formdata

from vidshare.api.v1.schemas.video import VideoResponse
from vidshare.domain.entities.media import FilePayload, MediaFiles
from vidshare.domain.entities.video import VideoRecord
from vidshare.domain.errors import ValidationError, Violation
from vidshare.domain.validation import UploadPolicy, format_size, validate_upload

ERROR_PREFIX = "Error uploading video. "
CHUNK_SIZE = 64 * 1024

ProgressCallback = Callable[[int], None]


class ApiError(Exception):
    """Non-2xx response from the vidshare API."""

    def __init__(self, status_code: int, message: Optional[str], details: Any = None):
        super().__init__(message or f"HTTP {status_code}")
        self.status_code = status_code
        self.message = message
        self.details = details


class UploadProgress:
    """
    Integer percentage of request bytes handed to the transport.
    Only ever moves forward; the callback fires once per new value.
    """

    def __init__(self, total_bytes: int, callback: Optional[ProgressCallback] = None):
        self.total_bytes = total_bytes
        self.sent_bytes = 0
        self.percent = 0
        self.callback = callback

    def advance(self, n: int) -> None:
        self.sent_bytes = min(self.total_bytes, self.sent_bytes + max(n, 0))
        percent = 100 if self.total_bytes == 0 else round(self.sent_bytes * 100 / self.total_bytes)
        if percent > self.percent:
            self.percent = percent
            if self.callback:
                self.callback(percent)


class _ProgressBody:
    # requests sizes the body with __len__ and streams it through read()
    def __init__(self, body: bytes, progress: UploadProgress):
        self._stream = io.BytesIO(body)
        self._length = len(body)
        self.progress = progress

    def __len__(self) -> int:
        return self._length

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            size = CHUNK_SIZE
        chunk = self._stream.read(size)
        self.progress.advance(len(chunk))
        return chunk


def _payload_from_path(path: Union[str, Path]) -> FilePayload:
    path = Path(path)
    content_type, _ = mimetypes.guess_type(path.name)
    return FilePayload.from_bytes(path.read_bytes(), content_type or "application/octet-stream", path.name)


@dataclass
class UploadForm:
    title: str
    description: str
    video: Optional[FilePayload] = None
    thumbnail: Optional[FilePayload] = None

    @classmethod
    def from_paths(cls, title: str, description: str, video_path: Union[str, Path], thumbnail_path: Union[str, Path]) -> "UploadForm":
        return cls(
            title=title,
            description=description,
            video=_payload_from_path(video_path),
            thumbnail=_payload_from_path(thumbnail_path),
        )

    @property
    def files(self) -> MediaFiles:
        return MediaFiles(video=self.video, thumbnail=self.thumbnail)

    def validate(self, policy: UploadPolicy) -> list[Violation]:
        return validate_upload(self.title, self.description, self.files, policy)

    def multipart_fields(self) -> list[tuple]:
        return [
            ("title", self.title),
            ("description", self.description),
            ("video", (self.video.filename or "video", self.video.content, self.video.content_type)),
            ("thumbnail", (self.thumbnail.filename or "thumbnail", self.thumbnail.content, self.thumbnail.content_type)),
        ]


def _record_from_json(data: dict) -> VideoRecord:
    return VideoRecord(**VideoResponse.model_validate(data).model_dump())


class VideoShareClient:
    """
    HTTP client for the videos API. A timeout only stops waiting for the
    server; bytes already sent may still be uploaded to the media host.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: Optional[float] = None, policy: Optional[UploadPolicy] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.policy = policy or UploadPolicy()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/videos{path}"

    def _check(self, response: requests.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            details = body.get("details") if isinstance(body, dict) else None
            raise ApiError(response.status_code, message, details)
        return body

    def upload(self, form: UploadForm, on_progress: Optional[ProgressCallback] = None) -> VideoRecord:
        """Validates locally, then sends all four fields in one multipart request."""
        violations = form.validate(self.policy)
        if violations:
            raise ValidationError(violations)

        body, content_type = encode_multipart_formdata(form.multipart_fields())
        progress = UploadProgress(len(body), on_progress)
        response = self.session.post(
            self._url(""),
            data=_ProgressBody(body, progress),
            headers={"Content-Type": content_type},
            timeout=self.timeout,
        )
        return _record_from_json(self._check(response))

    def list_videos(self) -> list[VideoRecord]:
        response = self.session.get(self._url(""), timeout=self.timeout)
        return [_record_from_json(item) for item in self._check(response)]

    def get_video(self, video_id: str) -> VideoRecord:
        response = self.session.get(self._url(f"/{video_id}"), timeout=self.timeout)
        return _record_from_json(self._check(response))


def describe_upload_error(exc: Exception, policy: Optional[UploadPolicy] = None) -> str:
    policy = policy or UploadPolicy()
    if isinstance(exc, ValidationError):
        return ERROR_PREFIX + exc.message
    if isinstance(exc, ApiError):
        if exc.message:
            return ERROR_PREFIX + exc.message
        if exc.status_code == 413:
            return ERROR_PREFIX + f"File size too large. Maximum size is {format_size(policy.max_video_bytes)}."
    if isinstance(exc, FileNotFoundError):
        return ERROR_PREFIX + f"File not found: {exc.filename}"
    if isinstance(exc, requests.exceptions.Timeout):
        return ERROR_PREFIX + "The server took too long to respond. The upload may still have completed."
    if isinstance(exc, requests.exceptions.ConnectionError):
        return ERROR_PREFIX + "Network error. Please check your connection."
    return ERROR_PREFIX + "Please try again."
