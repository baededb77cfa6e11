from abc import ABC, abstractmethod
from typing import Optional
from vidshare.domain.entities.video import VideoRecord

class VideoRepository(ABC):
    @abstractmethod
    def get_by_id(self, video_id: str) -> Optional[VideoRecord]:
        pass

    @abstractmethod
    def list_all(self) -> list[VideoRecord]:
        """Returns every record, newest first."""
        pass

    @abstractmethod
    def create(self, video: VideoRecord) -> VideoRecord:
        """Inserts one record and returns it with store-assigned id and timestamps."""
        pass
