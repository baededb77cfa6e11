from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from vidshare.api.v1.schemas.video import ErrorResponse, VideoResponse
from vidshare.application.use_cases.create_video import CreateVideoUseCase
from vidshare.application.use_cases.get_video import GetVideoByIdUseCase
from vidshare.application.use_cases.list_videos import ListVideosUseCase
from vidshare.domain.entities.media import FilePayload, MediaFiles

router = APIRouter(prefix="/videos", tags=["Videos"])

# Wire up the dependencies built once in create_app
def get_video_use_case(request: Request) -> GetVideoByIdUseCase:
    return GetVideoByIdUseCase(request.app.state.video_repo)

def list_videos_use_case(request: Request) -> ListVideosUseCase:
    return ListVideosUseCase(request.app.state.video_repo)

def create_video_use_case(request: Request) -> CreateVideoUseCase:
    state = request.app.state
    return CreateVideoUseCase(
        state.video_repo,
        state.media_host,
        policy=state.settings.upload_policy,
        cleanup_orphans=state.settings.cleanup_orphaned_media,
    )


async def _read_payload(upload: Optional[UploadFile]) -> Optional[FilePayload]:
    if upload is None:
        return None
    try:
        content = await upload.read()
    finally:
        await upload.close()
    return FilePayload.from_bytes(content, upload.content_type or "", upload.filename)


@router.get("", response_model=list[VideoResponse])
def list_videos(use_case: ListVideosUseCase = Depends(list_videos_use_case)):
    return [VideoResponse.model_validate(v) for v in use_case.execute()]


@router.get(
    "/{video_id}",
    response_model=VideoResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_video(video_id: str, use_case: GetVideoByIdUseCase = Depends(get_video_use_case)):
    return VideoResponse.model_validate(use_case.execute(video_id))


@router.post(
    "",
    status_code=201,
    response_model=VideoResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def upload_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    video: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    use_case: CreateVideoUseCase = Depends(create_video_use_case),
):
    """
    Uploads the video and thumbnail to the media host and stores the record.
    Every field is optional here so missing ones are reported by the upload
    validation with the same error shape as any other violation.
    """
    files = MediaFiles(video=await _read_payload(video), thumbnail=await _read_payload(thumbnail))
    created = await use_case.execute(title, description, files)
    return VideoResponse.model_validate(created)
