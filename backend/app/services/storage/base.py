"""
Base object storage protocol.

Defines the interface the publisher depends on, allowing S3 and test
doubles to be used interchangeably.
"""

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ObjectStorage(Protocol):
    """
    Protocol for durable object storage.

    Implementations persist a local file under a key and make it
    retrievable at a predictable URL. Retry policy, if any, belongs to the
    implementation.

    Example:
        async def store(storage: ObjectStorage, path: Path) -> None:
            await storage.put("portrait/abc123.mp4", path, "video/mp4")
    """

    async def put(self, key: str, path: Path, content_type: str) -> None:
        """
        Upload a local file under key.

        Args:
            key: Object key inside the bucket
            path: Local file to upload
            content_type: MIME type stored with the object

        Raises:
            StorageError: If the object could not be stored
        """
        ...


class StorageError(Exception):
    """
    Base exception for object storage errors.

    Attributes:
        message: Error description
        key: Object key being written
        original_error: Underlying exception if available
    """

    def __init__(
        self,
        message: str,
        key: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.key = key
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.key:
            parts.append(f"key={self.key}")
        return " | ".join(parts)
