"""
Video metadata persistence.

The HTTP layer reads video records and stores the playback URL after a
successful publish. The pipeline itself never touches this store.
"""

import logging
import threading
import uuid
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from app.models.schemas import Video, VideoCreateRequest

logger = logging.getLogger(__name__)

# Fields a caller may change after creation
UPDATABLE_FIELDS = frozenset({"title", "description", "thumbnail_url", "video_url"})


@runtime_checkable
class VideoRepository(Protocol):
    """Protocol for video metadata storage."""

    def create(self, request: VideoCreateRequest) -> Video:
        """Create a draft video record."""
        ...

    def get(self, video_id: str) -> Video | None:
        """Get video by ID, or None if not found."""
        ...

    def list_videos(self) -> list[Video]:
        """List all videos, oldest first."""
        ...

    def update(self, video_id: str, **fields: Any) -> Video:
        """Set the given fields on an existing video, leaving the rest untouched."""
        ...


class InMemoryVideoRepository:
    """
    Video metadata kept in process memory.

    Updates are partial and applied under the lock, so two requests touching
    different fields of one video (upload and thumbnail) never overwrite each
    other.

    Example:
        repo = InMemoryVideoRepository()
        video = repo.create(VideoCreateRequest(title="Demo"))
        repo.update(video.video_id, video_url="https://...")
    """

    def __init__(self):
        """Initialize empty store."""
        self._videos: dict[str, Video] = {}
        self._lock = threading.Lock()

    def create(self, request: VideoCreateRequest) -> Video:
        """
        Create a draft video record.

        Args:
            request: Title, description and owner

        Returns:
            Created Video with unique ID
        """
        video = Video(
            video_id=uuid.uuid4().hex,
            title=request.title,
            description=request.description,
            user_id=request.user_id,
        )

        with self._lock:
            self._videos[video.video_id] = video

        logger.info(f"Created video {video.video_id}: {video.title}")
        return video.model_copy()

    def get(self, video_id: str) -> Video | None:
        with self._lock:
            video = self._videos.get(video_id)
        return video.model_copy() if video else None

    def list_videos(self) -> list[Video]:
        """List all videos, oldest first."""
        with self._lock:
            videos = list(self._videos.values())
        return [v.model_copy() for v in sorted(videos, key=lambda v: v.created_at)]

    def update(self, video_id: str, **fields: Any) -> Video:
        """
        Set the given fields on an existing video.

        Args:
            video_id: Video identifier
            **fields: Field values to change (title, description,
                thumbnail_url, video_url)

        Returns:
            Updated Video

        Raises:
            KeyError: If the video does not exist
            ValueError: If a field cannot be updated
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        with self._lock:
            current = self._videos.get(video_id)
            if current is None:
                raise KeyError(f"Video not found: {video_id}")

            updated = current.model_copy(update={**fields, "updated_at": datetime.now()})
            self._videos[video_id] = updated

        logger.debug(f"Updated video {video_id}: {', '.join(sorted(fields))}")
        return updated.model_copy()


# Global repository instance
video_repository = InMemoryVideoRepository()


def get_video_repository() -> InMemoryVideoRepository:
    """Get global video repository instance."""
    return video_repository
