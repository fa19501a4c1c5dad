"""
In-memory thumbnail store.

Holds uploaded thumbnail images keyed by video id, bounded by entry count
(least recently used evicted first) and by age (entries expire after a TTL).
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from app.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Thumbnail:
    """
    Cached thumbnail image.

    Attributes:
        data: Raw image bytes
        media_type: MIME type served with the image
        stored_at: Clock value at insertion (seconds)
    """

    data: bytes
    media_type: str
    stored_at: float


class ThumbnailStore:
    """
    Bounded thumbnail cache, safe for concurrent requests.

    Example:
        store = ThumbnailStore(max_entries=256, ttl_seconds=3600)
        store.put("abc123", image_bytes, "image/png")
        thumb = store.get("abc123")  # None once expired or evicted
    """

    def __init__(
        self,
        max_entries: int = 256,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize empty store.

        Args:
            max_entries: Maximum number of cached thumbnails
            ttl_seconds: Lifetime of an entry
            clock: Time source in seconds (injectable for tests)
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, Thumbnail] = OrderedDict()
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ThumbnailStore":
        """Create ThumbnailStore from application settings."""
        return cls(
            max_entries=settings.thumbnail_cache_max_entries,
            ttl_seconds=settings.thumbnail_cache_ttl_seconds,
        )

    def put(self, video_id: str, data: bytes, media_type: str) -> Thumbnail:
        """
        Store or replace a thumbnail.

        Args:
            video_id: Video identifier
            data: Image bytes
            media_type: Image MIME type

        Returns:
            Stored Thumbnail
        """
        thumbnail = Thumbnail(data=data, media_type=media_type, stored_at=self._clock())

        with self._lock:
            self._entries[video_id] = thumbnail
            self._entries.move_to_end(video_id)
            self._purge_expired()

            while len(self._entries) > self.max_entries:
                evicted_id, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted thumbnail {evicted_id} (capacity {self.max_entries})")

        return thumbnail

    def get(self, video_id: str) -> Thumbnail | None:
        """
        Get a thumbnail if present and not expired.

        Args:
            video_id: Video identifier

        Returns:
            Thumbnail or None
        """
        with self._lock:
            thumbnail = self._entries.get(video_id)
            if thumbnail is None:
                return None

            if self._is_expired(thumbnail):
                del self._entries[video_id]
                logger.debug(f"Thumbnail {video_id} expired")
                return None

            self._entries.move_to_end(video_id)
            return thumbnail

    def delete(self, video_id: str) -> bool:
        """Remove a thumbnail. Returns True if one was stored."""
        with self._lock:
            return self._entries.pop(video_id, None) is not None

    def __len__(self) -> int:
        """Return number of stored (possibly expired) thumbnails."""
        with self._lock:
            return len(self._entries)

    def __contains__(self, video_id: str) -> bool:
        """Check if a live thumbnail is stored."""
        return self.get(video_id) is not None

    def _is_expired(self, thumbnail: Thumbnail) -> bool:
        return self._clock() - thumbnail.stored_at >= self.ttl_seconds

    def _purge_expired(self) -> None:
        """Drop expired entries. Caller holds the lock."""
        expired = [vid for vid, thumb in self._entries.items() if self._is_expired(thumb)]
        for vid in expired:
            del self._entries[vid]
