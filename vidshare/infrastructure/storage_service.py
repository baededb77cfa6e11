import asyncio
import logging
import mimetypes
import uuid
from pathlib import PurePath
from typing import Optional

import requests
from google.api_core import exceptions as gcs_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import storage

from vidshare.domain.entities.media import FilePayload, MediaCategory, MediaKind, UploadedMedia
from vidshare.domain.errors import MediaHostError, UploadFailureReason
from vidshare.domain.repositories.media_host import MediaHost
from vidshare.domain.validation import normalize_content_type

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=31536000"


def classify_failure(exc: Exception) -> UploadFailureReason:
    """Maps a storage SDK exception onto the reasons reported to API callers."""
    if isinstance(exc, gcs_exceptions.GoogleAPICallError):
        if exc.code in (400, 415):
            return UploadFailureReason.FORMAT_REJECTED
        if exc.code == 413:
            return UploadFailureReason.SIZE_EXCEEDED
        return UploadFailureReason.SERVICE_FAILURE
    if isinstance(exc, (requests.exceptions.RequestException, auth_exceptions.TransportError, ConnectionError, TimeoutError)):
        return UploadFailureReason.NETWORK_FAILURE
    return UploadFailureReason.SERVICE_FAILURE


def _extension(payload: FilePayload) -> str:
    if payload.filename:
        suffix = PurePath(payload.filename).suffix.lower()
        if suffix:
            return suffix
    return mimetypes.guess_extension(normalize_content_type(payload.content_type)) or ""


class GCSMediaHost(MediaHost):
    """
    Stores uploads in a single Cloud Storage bucket under one prefix per category.
    The blob name doubles as the media id.
    """

    def __init__(self, storage_client: storage.Client, bucket_name: str, public_base_url: Optional[str] = None):
        self.storage_client = storage_client
        self.bucket_name = bucket_name
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None

    def _public_url(self, blob, blob_name: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{blob_name}"
        return blob.public_url

    def _upload_sync(self, payload: FilePayload, category: MediaCategory, kind: MediaKind) -> UploadedMedia:
        blob_name = f"{category.value}/{uuid.uuid4().hex}{_extension(payload)}"
        bucket = self.storage_client.bucket(self.bucket_name)
        blob = bucket.blob(blob_name)
        # Blob.metadata returns a copy, so build the dict before assigning it
        metadata = {"resource_type": kind.value}
        if payload.filename:
            metadata["original_filename"] = payload.filename
        blob.metadata = metadata
        blob.cache_control = CACHE_CONTROL

        logger.info("📤 Uploading %s (%d bytes) to %s/%s", kind.value, payload.size_bytes, self.bucket_name, blob_name)
        blob.upload_from_string(payload.content, content_type=normalize_content_type(payload.content_type))
        logger.info("✅ Uploaded %s/%s", self.bucket_name, blob_name)

        return UploadedMedia(url=self._public_url(blob, blob_name), media_id=blob_name, kind=kind)

    async def upload(self, payload: FilePayload, category: MediaCategory, kind: MediaKind) -> UploadedMedia:
        try:
            return await asyncio.to_thread(self._upload_sync, payload, category, kind)
        except Exception as e:
            reason = classify_failure(e)
            logger.error("❌ Upload to %s/%s failed (%s): %s", self.bucket_name, category.value, reason.value, e)
            raise MediaHostError(reason, str(e)) from e

    def _delete_sync(self, media_id: str) -> None:
        blob = self.storage_client.bucket(self.bucket_name).blob(media_id)
        try:
            blob.delete()
        except gcs_exceptions.NotFound:
            logger.warning("Media %s/%s already absent", self.bucket_name, media_id)
            return
        logger.info("🗑️ Deleted %s/%s", self.bucket_name, media_id)

    async def delete(self, media_id: str) -> None:
        try:
            await asyncio.to_thread(self._delete_sync, media_id)
        except Exception as e:
            raise MediaHostError(classify_failure(e), str(e)) from e
