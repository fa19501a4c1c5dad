"""
Application configuration and settings.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # External tools
    ffprobe_bin: str = "ffprobe"
    ffmpeg_bin: str = "ffmpeg"

    # Paths
    temp_dir: Path = Path("/tmp")  # Staging area for uploads and remuxed copies

    # Object storage (S3)
    s3_bucket: str = "videos"
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None  # Custom endpoint (MinIO, LocalStack)
    video_url_template: str = "https://{bucket}.s3.{region}.amazonaws.com/{key}"
    storage_max_attempts: int = 3

    # Upload limits
    max_video_upload_bytes: int = 1 << 30  # 1 GB
    max_thumbnail_upload_bytes: int = 10 << 20  # 10 MB
    supported_video_type: str = "video/mp4"

    # Thumbnail cache
    thumbnail_cache_max_entries: int = 256
    thumbnail_cache_ttl_seconds: int = 3600

    # Logging
    log_level: str = "INFO"
    log_format: str = "structured"  # "simple" or "structured"

    # Per-module log levels (optional overrides)
    log_level_pipeline: str | None = None
    log_level_storage: str | None = None
    log_level_processes: str | None = None

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def build_video_url(key: str, settings: Settings | None = None) -> str:
    """
    Build the public playback URL for a stored object.

    Args:
        key: Object storage key (e.g. "landscape/abc123.mp4")
        settings: Optional settings instance

    Returns:
        Fully-qualified URL rendered from settings.video_url_template
    """
    if settings is None:
        settings = get_settings()

    return settings.video_url_template.format(
        bucket=settings.s3_bucket,
        region=settings.s3_region,
        key=key,
    )
