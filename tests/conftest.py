"""Shared fixtures: in-memory stand-ins for the record store and media host."""

from __future__ import annotations

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from vidshare.config import Settings
from vidshare.domain.entities.media import FilePayload, MediaCategory, MediaKind, UploadedMedia
from vidshare.domain.entities.video import VideoRecord
from vidshare.domain.errors import MediaHostError, UploadFailureReason
from vidshare.domain.repositories.media_host import MediaHost
from vidshare.domain.repositories.video_repository import VideoRepository

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class InMemoryVideoRepository(VideoRepository):
    def __init__(self) -> None:
        self.records: dict[str, VideoRecord] = {}
        self.fail_next_create: Optional[Exception] = None
        self._clock = 0

    def get_by_id(self, video_id: str) -> Optional[VideoRecord]:
        return self.records.get(video_id)

    def list_all(self) -> list[VideoRecord]:
        return sorted(self.records.values(), key=lambda v: v.created_at, reverse=True)

    def create(self, video: VideoRecord) -> VideoRecord:
        if self.fail_next_create is not None:
            exc, self.fail_next_create = self.fail_next_create, None
            raise exc
        self._clock += 1
        stamp = BASE_TIME + timedelta(seconds=self._clock)
        stored = VideoRecord(
            id=str(uuid.uuid4()),
            title=video.title,
            description=video.description,
            thumbnail_url=video.thumbnail_url,
            video_url=video.video_url,
            thumbnail_media_id=video.thumbnail_media_id,
            video_media_id=video.video_media_id,
            created_at=stamp,
            updated_at=stamp,
        )
        self.records[stored.id] = stored
        return stored


class FakeMediaHost(MediaHost):
    def __init__(self) -> None:
        self.uploads: list[tuple[MediaCategory, MediaKind, FilePayload]] = []
        self.deleted: list[str] = []
        self.failures: dict[MediaCategory, MediaHostError] = {}
        self.delete_failure: Optional[MediaHostError] = None
        self.delay: float = 0.0
        self.in_flight = 0
        self.max_in_flight = 0
        self._counter = 0

    def fail(self, category: MediaCategory, reason: UploadFailureReason = UploadFailureReason.SERVICE_FAILURE, message: str = "boom") -> None:
        self.failures[category] = MediaHostError(reason, message)

    def fail_deletes(self, reason: UploadFailureReason = UploadFailureReason.NETWORK_FAILURE, message: str = "delete failed") -> None:
        self.delete_failure = MediaHostError(reason, message)

    async def upload(self, payload: FilePayload, category: MediaCategory, kind: MediaKind) -> UploadedMedia:
        self.uploads.append((category, kind, payload))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        if category in self.failures:
            raise self.failures[category]
        self._counter += 1
        media_id = f"{category.value}/asset-{self._counter}"
        return UploadedMedia(url=f"https://media.example.com/{media_id}", media_id=media_id, kind=kind)

    async def delete(self, media_id: str) -> None:
        if self.delete_failure is not None:
            raise self.delete_failure
        self.deleted.append(media_id)


def make_payload(content_type: str, size: int = 16, filename: Optional[str] = None) -> FilePayload:
    return FilePayload(content=b"x" * size, content_type=content_type, size_bytes=size, filename=filename)


@pytest.fixture
def video_repo() -> InMemoryVideoRepository:
    return InMemoryVideoRepository()


@pytest.fixture
def media_host() -> FakeMediaHost:
    return FakeMediaHost()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_key="test-key",
        max_video_bytes=1024,
        max_thumbnail_bytes=256,
        max_request_bytes=4096,
        cors_allow_origins=("*",),
    )
