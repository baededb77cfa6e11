from dataclasses import dataclass
from datetime import datetime
from typing import Optional

@dataclass
class VideoRecord:
    title: str
    description: str
    thumbnail_url: str
    video_url: str
    thumbnail_media_id: str
    video_media_id: str
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
