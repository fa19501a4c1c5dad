"""
HTTP API routes for video thumbnails.

Thumbnails are kept in the in-memory ThumbnailStore and served back from
/api/thumbnails/{video_id}.
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile

from app.api.dependencies import get_repository, get_thumbnail_store
from app.api.routes import require_video, update_video, upload_size
from app.config import Settings, get_settings
from app.models.schemas import Video
from app.services.thumbnail_store import ThumbnailStore
from app.services.video_repository import VideoRepository
from app.utils.media_utils import is_thumbnail_type

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["thumbnails"])


@router.post("/videos/{video_id}/thumbnail", response_model=Video)
async def upload_thumbnail(
    video_id: str,
    thumbnail: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
    repository: VideoRepository = Depends(get_repository),
    store: ThumbnailStore = Depends(get_thumbnail_store),
) -> Video:
    """
    Upload a thumbnail image for a video.

    Args:
        video_id: Video identifier
        thumbnail: Multipart file field "thumbnail" (image, at most 10 MB)

    Returns:
        Updated Video with thumbnail_url

    Raises:
        400: Missing, oversized or non-image file
        404: Video not found
    """
    require_video(video_id, repository)

    if thumbnail is None:
        raise HTTPException(status_code=400, detail="No thumbnail file provided")

    if upload_size(thumbnail) > settings.max_thumbnail_upload_bytes:
        raise HTTPException(status_code=400, detail="Thumbnail file is too large")

    if not is_thumbnail_type(thumbnail.content_type):
        raise HTTPException(status_code=400, detail="Unsupported file type for thumbnail")

    data = await thumbnail.read()
    await thumbnail.close()

    store.put(video_id, data, thumbnail.content_type)
    logger.info(f"Stored thumbnail for video {video_id} ({len(data)} bytes)")

    return update_video(repository, video_id, thumbnail_url=f"/api/thumbnails/{video_id}")


@router.get("/thumbnails/{video_id}")
async def get_thumbnail(
    video_id: str,
    store: ThumbnailStore = Depends(get_thumbnail_store),
) -> Response:
    """
    Serve a stored thumbnail.

    Raises:
        404: No thumbnail stored, or it expired
    """
    thumb = store.get(video_id)
    if thumb is None:
        raise HTTPException(status_code=404, detail="Thumbnail not found")

    return Response(content=thumb.data, media_type=thumb.media_type)
