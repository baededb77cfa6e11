from vidshare.domain.entities.video import VideoRecord
from vidshare.domain.errors import NotFoundError
from vidshare.domain.repositories.video_repository import VideoRepository

class GetVideoByIdUseCase:
    def __init__(self, video_repo: VideoRepository):
        self.video_repo = video_repo

    def execute(self, video_id: str) -> VideoRecord:
        video = self.video_repo.get_by_id(video_id)

        if not video:
            raise NotFoundError("Video not found")

        return video
