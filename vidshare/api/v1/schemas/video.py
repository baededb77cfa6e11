from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class VideoResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    title: str
    description: str
    thumbnail_url: str
    video_url: str
    thumbnail_media_id: str
    video_media_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ErrorResponse(BaseModel):
    message: str
    details: Optional[Any] = None
