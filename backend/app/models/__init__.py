"""
Pydantic models for the video ingest pipeline.
"""

from app.models.schemas import (
    Geometry,
    MediaAsset,
    Orientation,
    PipelineResult,
    PipelineStage,
    ProcessingStatus,
    PublishedLocation,
    RemuxedFile,
    StagedFile,
    Video,
    VideoCreateRequest,
)

__all__ = [
    "Geometry",
    "MediaAsset",
    "Orientation",
    "PipelineResult",
    "PipelineStage",
    "ProcessingStatus",
    "PublishedLocation",
    "RemuxedFile",
    "StagedFile",
    "Video",
    "VideoCreateRequest",
]
