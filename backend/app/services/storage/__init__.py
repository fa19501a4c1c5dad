"""
Object storage package for processed videos.

Provides a storage-agnostic interface for the publisher:
- ObjectStorage: protocol every backend implements
- S3ObjectStorage: Amazon S3 (or S3-compatible) backend on boto3

Usage:
    from app.services.storage import ObjectStorage, S3ObjectStorage

    storage = S3ObjectStorage.from_settings(settings)
    await storage.put("landscape/abc123.mp4", Path("/tmp/out.mp4"), "video/mp4")
"""

from app.services.storage.base import ObjectStorage, StorageError
from app.services.storage.s3_storage import S3ObjectStorage

__all__ = [
    # Protocol and errors
    "ObjectStorage",
    "StorageError",
    # Implementations
    "S3ObjectStorage",
]
