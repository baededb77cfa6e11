from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class VideoShareError(Exception):
    """Base error for every failure surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


@dataclass
class Violation:
    field: str
    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "code": self.code, "message": self.message}


class ValidationError(VideoShareError):
    status_code = 400

    def __init__(self, violations: list[Violation]):
        self.violations = list(violations)
        message = "; ".join(v.message for v in self.violations) or "Invalid upload"
        super().__init__(message, details=[v.to_dict() for v in self.violations])
        if any(v.code == "too_large" for v in self.violations):
            self.status_code = 413


class UploadFailureReason(str, Enum):
    FORMAT_REJECTED = "format_rejected"
    SIZE_EXCEEDED = "size_exceeded"
    SERVICE_FAILURE = "service_failure"
    NETWORK_FAILURE = "network_failure"


class MediaHostError(Exception):
    """Raised by a media host when a single upload or delete call fails."""

    def __init__(self, reason: UploadFailureReason, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class UploadError(VideoShareError):
    status_code = 500

    def __init__(self, asset: str, reason: UploadFailureReason, message: str, details: Optional[Any] = None):
        self.asset = asset
        self.reason = reason
        body = {"asset": asset, "reason": reason.value}
        if details:
            body.update(details)
        super().__init__(f"Failed to upload {asset}: {message}", details=body)
        if reason == UploadFailureReason.SIZE_EXCEEDED:
            self.status_code = 413
        elif reason == UploadFailureReason.FORMAT_REJECTED:
            self.status_code = 400


class PersistenceError(VideoShareError):
    status_code = 500


class NotFoundError(VideoShareError):
    status_code = 404

    def __init__(self, message: str = "Video not found", details: Optional[Any] = None):
        super().__init__(message, details)
