from abc import ABC, abstractmethod
from vidshare.domain.entities.media import FilePayload, MediaCategory, MediaKind, UploadedMedia

class MediaHost(ABC):
    """
    Remote store for binary assets. Implementations raise MediaHostError on failure.
    """

    @abstractmethod
    async def upload(self, payload: FilePayload, category: MediaCategory, kind: MediaKind) -> UploadedMedia:
        pass

    @abstractmethod
    async def delete(self, media_id: str) -> None:
        pass
