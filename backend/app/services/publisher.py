"""
Publishing of processed videos to object storage.

Builds the orientation-prefixed storage key, uploads through the storage
collaborator and returns the playback URL.
"""

import logging
from pathlib import Path

from app.config import Settings, build_video_url
from app.models.schemas import Orientation, PublishedLocation
from app.services.errors import PublishFailed
from app.services.storage import ObjectStorage
from app.utils.media_utils import build_storage_key

logger = logging.getLogger(__name__)


class VideoPublisher:
    """
    Uploads processed videos under "{orientation}/{identifier}.mp4".

    The orientation prefix lets downstream consumers partition by bucket
    without re-probing. No retries here: retry policy belongs to storage.

    Example:
        publisher = VideoPublisher(storage, settings)
        location = await publisher.publish(
            path, Orientation.PORTRAIT, "abc123", "video/mp4"
        )
        location.key  # "portrait/abc123.mp4"
    """

    def __init__(self, storage: ObjectStorage, settings: Settings):
        """
        Initialize publisher.

        Args:
            storage: Object storage collaborator
            settings: Application settings (bucket, region, URL template)
        """
        self.storage = storage
        self.settings = settings

    async def publish(
        self,
        local_path: Path,
        orientation: Orientation | str,
        identifier: str,
        content_type: str,
    ) -> PublishedLocation:
        """
        Upload a local file and build its playback location.

        Args:
            local_path: Remuxed file to upload
            orientation: Orientation bucket used as key prefix
            identifier: Asset identifier
            content_type: MIME type of the video

        Returns:
            PublishedLocation with key and URL

        Raises:
            PublishFailed: If the storage collaborator fails
        """
        prefix = orientation.value if isinstance(orientation, Orientation) else orientation
        key = build_storage_key(prefix, identifier)

        try:
            await self.storage.put(key, Path(local_path), content_type)
        except Exception as e:
            raise PublishFailed(f"Upload of {key} failed: {e}", e)

        url = build_video_url(key, self.settings)
        logger.info(f"Published {identifier}: {url}")

        return PublishedLocation(key=key, url=url)
