"""
Media utilities for video file handling.

Provides common functions for staged media files:
- Staged and remuxed path derivation
- Storage key construction
- Content type to extension mapping
"""

from pathlib import Path

# Extension of every staged and published video
VIDEO_EXTENSION = "mp4"

# Suffix appended to a staged path to name its remuxed sibling
REMUX_SUFFIX = ".processed.mp4"

# Thumbnail media types accepted for upload
THUMBNAIL_MEDIA_TYPES = frozenset({"image/jpeg", "image/png", "image/webp", "image/gif"})


def staged_path_for(temp_dir: Path, asset_id: str) -> Path:
    """Get the local staging path for an asset.

    Args:
        temp_dir: Staging directory
        asset_id: Asset identifier

    Returns:
        Path like temp_dir/{asset_id}.mp4

    Raises:
        ValueError: If asset_id would escape temp_dir
    """
    if not asset_id or "/" in asset_id or "\\" in asset_id or asset_id in (".", ".."):
        raise ValueError(f"Invalid asset id: {asset_id!r}")
    return Path(temp_dir) / f"{asset_id}.{VIDEO_EXTENSION}"


def remuxed_path_for(staged_path: Path) -> Path:
    """Get the remuxed sibling of a staged file.

    Args:
        staged_path: Path to staged video

    Returns:
        Same path with REMUX_SUFFIX appended
    """
    staged_path = Path(staged_path)
    return staged_path.with_name(staged_path.name + REMUX_SUFFIX)


def build_storage_key(orientation: str, identifier: str) -> str:
    """Build the object storage key for a published video.

    Args:
        orientation: Orientation bucket value (landscape, portrait, other)
        identifier: Asset identifier

    Returns:
        Key like "portrait/abc123.mp4"
    """
    return f"{orientation}/{identifier}.{VIDEO_EXTENSION}"


def is_thumbnail_type(media_type: str | None) -> bool:
    """Check if a media type is an accepted thumbnail image type."""
    return (media_type or "").split(";")[0].strip().lower() in THUMBNAIL_MEDIA_TYPES
