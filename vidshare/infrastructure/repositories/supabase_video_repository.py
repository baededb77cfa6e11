import logging
import re
import uuid
from datetime import datetime
from typing import Any, Optional

from supabase import Client

from vidshare.domain.entities.video import VideoRecord
from vidshare.domain.repositories.video_repository import VideoRepository

logger = logging.getLogger(__name__)

_FRACTION = re.compile(r"\.(\d+)")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parses PostgREST timestamps such as 2024-05-01T10:00:00.12345+00:00.
    """
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).replace("Z", "+00:00")
    # fromisoformat wants exactly 6 fractional digits on older interpreters
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


class SupabaseVideoRepository(VideoRepository):
    def __init__(self, client: Client, table: str = "videos"):
        self.client = client
        self.table = table

    def get_by_id(self, video_id: str) -> Optional[VideoRecord]:
        # ids are uuid columns; anything else can never match
        if not _is_uuid(video_id):
            return None
        try:
            res = self.client.table(self.table).select("*").eq("id", video_id).limit(1).execute()
        except Exception as e:
            logger.error("Fetch video %s database error: %s", video_id, e)
            raise

        if not res.data:
            return None
        return self._map_to_entity(res.data[0])

    def list_all(self) -> list[VideoRecord]:
        try:
            res = (
                self.client
                .table(self.table)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error("List videos database error: %s", e)
            raise

        return [self._map_to_entity(item) for item in res.data or []]

    def create(self, video: VideoRecord) -> VideoRecord:
        data = {
            "title": video.title,
            "description": video.description,
            "thumbnail_url": video.thumbnail_url,
            "video_url": video.video_url,
            "thumbnail_media_id": video.thumbnail_media_id,
            "video_media_id": video.video_media_id,
        }
        try:
            res = self.client.table(self.table).insert(data).execute()
        except Exception as e:
            logger.error("Save video database error: %s", e)
            raise

        if not res.data:
            raise RuntimeError("Failed to save video to database")

        return self._map_to_entity(res.data[0])

    def _map_to_entity(self, data: dict) -> VideoRecord:
        return VideoRecord(
            id=str(data["id"]),
            title=data["title"],
            description=data["description"],
            thumbnail_url=data["thumbnail_url"],
            video_url=data["video_url"],
            thumbnail_media_id=data["thumbnail_media_id"],
            video_media_id=data["video_media_id"],
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )
