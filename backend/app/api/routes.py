"""
HTTP API routes for videos.

Provides endpoints for:
- Creating and reading video records
- Uploading a video file through the ingest pipeline
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from app.api.dependencies import get_orchestrator, get_repository
from app.config import Settings, get_settings
from app.models.schemas import MediaAsset, Video, VideoCreateRequest
from app.services.errors import StageFailed
from app.services.pipeline import PipelineOrchestrator
from app.services.video_repository import VideoRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["videos"])


def upload_size(file: UploadFile) -> int:
    """
    Get size of an uploaded file in bytes.

    Uses UploadFile.size when the server reported it, otherwise seeks the
    spooled file.
    """
    if file.size is not None:
        return file.size

    position = file.file.tell()
    file.file.seek(0, 2)
    size = file.file.tell()
    file.file.seek(position)
    return size


def require_video(video_id: str, repository: VideoRepository) -> Video:
    """Get video or raise 404."""
    video = repository.get(video_id)
    if not video:
        raise HTTPException(status_code=404, detail="Couldn't find video")
    return video


def update_video(repository: VideoRepository, video_id: str, **fields) -> Video:
    """Apply a partial update or raise 404 if the video is gone."""
    try:
        return repository.update(video_id, **fields)
    except KeyError:
        raise HTTPException(status_code=404, detail="Couldn't find video")


@router.post("/videos", response_model=Video, status_code=201)
async def create_video(
    request: VideoCreateRequest,
    repository: VideoRepository = Depends(get_repository),
) -> Video:
    """
    Create a draft video record.

    Args:
        request: Title, description and owner

    Returns:
        Created Video (no video_url until a file is uploaded)
    """
    return repository.create(request)


@router.get("/videos", response_model=list[Video])
async def list_videos(
    repository: VideoRepository = Depends(get_repository),
) -> list[Video]:
    """List all video records."""
    return repository.list_videos()


@router.get("/videos/{video_id}", response_model=Video)
async def get_video(
    video_id: str,
    repository: VideoRepository = Depends(get_repository),
) -> Video:
    """
    Get video record.

    Raises:
        404: Video not found
    """
    return require_video(video_id, repository)


@router.post("/videos/{video_id}/upload", response_model=Video)
async def upload_video(
    video_id: str,
    video: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
    repository: VideoRepository = Depends(get_repository),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> Video:
    """
    Upload a video file and publish it.

    Stages the file, probes its orientation, remuxes it for fast start,
    uploads it under "{orientation}/{video_id}.mp4" and stores the
    playback URL on the video record.

    Args:
        video_id: Video identifier
        video: Multipart file field "video" (video/mp4, at most 1 GB)

    Returns:
        Updated Video with video_url

    Raises:
        400: Missing, oversized or non-MP4 file
        404: Video not found
        500: Pipeline stage failed
    """
    require_video(video_id, repository)

    if video is None:
        raise HTTPException(status_code=400, detail="No video file provided")

    size = upload_size(video)
    if size > settings.max_video_upload_bytes:
        raise HTTPException(status_code=400, detail="Video file is too large")

    if video.content_type != settings.supported_video_type:
        raise HTTPException(status_code=400, detail="Unsupported file type for video")

    asset = MediaAsset(asset_id=video_id, size_bytes=size, content_type=video.content_type)
    logger.info(f"Uploading video {video_id} ({size / 1024 / 1024:.1f} MB)")

    try:
        result = await orchestrator.process(asset, video.file)
    except StageFailed as e:
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        await video.close()

    return update_video(repository, video_id, video_url=result.location.url)
