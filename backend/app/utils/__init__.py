"""
Shared utilities.

Modules:
    media_utils: Staged/remuxed path derivation, storage keys, media types
"""

from app.utils.media_utils import (
    REMUX_SUFFIX,
    VIDEO_EXTENSION,
    build_storage_key,
    is_thumbnail_type,
    remuxed_path_for,
    staged_path_for,
)

__all__ = [
    "REMUX_SUFFIX",
    "VIDEO_EXTENSION",
    "build_storage_key",
    "is_thumbnail_type",
    "remuxed_path_for",
    "staged_path_for",
]
