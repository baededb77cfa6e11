import asyncio
import logging
from typing import Optional

from vidshare.domain.entities.media import MediaCategory, MediaFiles, MediaKind, UploadedMedia
from vidshare.domain.entities.video import VideoRecord
from vidshare.domain.errors import MediaHostError, PersistenceError, UploadError, UploadFailureReason
from vidshare.domain.repositories.media_host import MediaHost
from vidshare.domain.repositories.video_repository import VideoRepository
from vidshare.domain.validation import UploadPolicy, ensure_valid_upload

logger = logging.getLogger(__name__)


def _failure(exc: BaseException) -> tuple[UploadFailureReason, str]:
    if isinstance(exc, MediaHostError):
        return exc.reason, exc.message
    return UploadFailureReason.SERVICE_FAILURE, str(exc) or type(exc).__name__


class CreateVideoUseCase:
    def __init__(self, video_repo: VideoRepository, media_host: MediaHost, policy: Optional[UploadPolicy] = None, cleanup_orphans: bool = True):
        self.video_repo = video_repo
        self.media_host = media_host
        self.policy = policy or UploadPolicy()
        self.cleanup_orphans = cleanup_orphans

    async def execute(self, title: Optional[str], description: Optional[str], files: MediaFiles) -> VideoRecord:
        """
        Validates the submission, uploads both files, then stores the record.
        Nothing is persisted unless both uploads succeeded.
        """
        # 1. Reject bad input before any transfer
        ensure_valid_upload(title, description, files, self.policy)

        # 2. Both uploads are independent, so run them together
        thumbnail_result, video_result = await asyncio.gather(
            self.media_host.upload(files.thumbnail, MediaCategory.THUMBNAILS, MediaKind.IMAGE),
            self.media_host.upload(files.video, MediaCategory.VIDEOS, MediaKind.VIDEO),
            return_exceptions=True,
        )
        for result in (thumbnail_result, video_result):
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result

        failures = {
            asset: result
            for asset, result in (("video", video_result), ("thumbnail", thumbnail_result))
            if isinstance(result, Exception)
        }
        if failures:
            succeeded = [r for r in (thumbnail_result, video_result) if isinstance(r, UploadedMedia)]
            await self._discard(succeeded)
            error = self._upload_error(failures)
            raise error from failures[error.asset]

        # 3. Single insert referencing both assets
        video = VideoRecord(
            title=title,
            description=description,
            thumbnail_url=thumbnail_result.url,
            video_url=video_result.url,
            thumbnail_media_id=thumbnail_result.media_id,
            video_media_id=video_result.media_id,
        )
        try:
            created = await asyncio.to_thread(self.video_repo.create, video)
        except Exception as e:
            logger.error("Record write failed after uploads %s, %s: %s", video.video_media_id, video.thumbnail_media_id, e)
            await self._discard([thumbnail_result, video_result])
            raise PersistenceError(
                "Failed to save video record",
                details={"videoMediaId": video.video_media_id, "thumbnailMediaId": video.thumbnail_media_id},
            ) from e

        logger.info("🎬 Created video %s (%r)", created.id, created.title)
        return created

    def _upload_error(self, failures: dict[str, Exception]) -> UploadError:
        # video is reported first when both fail
        asset = "video" if "video" in failures else "thumbnail"
        reason, message = _failure(failures[asset])
        details = {}
        for other, exc in failures.items():
            if other != asset:
                other_reason, other_message = _failure(exc)
                details["also_failed"] = {"asset": other, "reason": other_reason.value, "message": other_message}
        logger.error("❌ %s upload failed (%s): %s", asset, reason.value, message)
        return UploadError(asset, reason, message, details=details)

    async def _discard(self, uploads: list[UploadedMedia]) -> None:
        if not uploads:
            return
        if not self.cleanup_orphans:
            for media in uploads:
                logger.warning("Leaving orphaned media %s at the host", media.media_id)
            return

        results = await asyncio.gather(
            *(self.media_host.delete(media.media_id) for media in uploads),
            return_exceptions=True,
        )
        for media, result in zip(uploads, results):
            if isinstance(result, Exception):
                logger.warning("Could not remove orphaned media %s: %s", media.media_id, result)
