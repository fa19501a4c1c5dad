"""
Dependency providers for API routes.

Routes receive collaborators through FastAPI's Depends so tests can
replace them via app.dependency_overrides.
"""

from functools import lru_cache

from app.config import get_settings
from app.services.pipeline import PipelineOrchestrator
from app.services.thumbnail_store import ThumbnailStore
from app.services.video_repository import VideoRepository, get_video_repository


@lru_cache
def get_orchestrator() -> PipelineOrchestrator:
    """Get shared pipeline orchestrator (one S3 client per process)."""
    return PipelineOrchestrator(get_settings())


@lru_cache
def get_thumbnail_store() -> ThumbnailStore:
    """Get shared thumbnail store."""
    return ThumbnailStore.from_settings(get_settings())


def get_repository() -> VideoRepository:
    """Get video metadata repository."""
    return get_video_repository()
