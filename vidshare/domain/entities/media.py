from dataclasses import dataclass
from enum import Enum
from typing import Optional

class MediaKind(str, Enum):
    VIDEO = 'video'
    IMAGE = 'image'

class MediaCategory(str, Enum):
    VIDEOS = 'videos'
    THUMBNAILS = 'thumbnails'

@dataclass
class FilePayload:
    content: bytes
    content_type: str
    size_bytes: int
    filename: Optional[str] = None

    @classmethod
    def from_bytes(cls, content: bytes, content_type: str, filename: Optional[str] = None) -> "FilePayload":
        return cls(content=content, content_type=content_type, size_bytes=len(content), filename=filename)

@dataclass
class MediaFiles:
    video: Optional[FilePayload] = None
    thumbnail: Optional[FilePayload] = None

@dataclass
class UploadedMedia:
    url: str
    media_id: str
    kind: MediaKind
