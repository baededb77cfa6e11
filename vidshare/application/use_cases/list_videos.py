from vidshare.domain.entities.video import VideoRecord
from vidshare.domain.repositories.video_repository import VideoRepository

class ListVideosUseCase:
    def __init__(self, video_repo: VideoRepository):
        self.video_repo = video_repo

    def execute(self) -> list[VideoRecord]:
        # Ordering (newest first) is the repository's job so the store can index it
        return self.video_repo.list_all()
