"""
Pydantic models for the video ingest pipeline.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ProcessingStatus(str, Enum):
    """State of a single pipeline run.

    Linear order: received -> staged -> probed -> classified -> remuxed
    -> published -> cleaned. FAILED is reachable from any state.
    """
    RECEIVED = "received"
    STAGED = "staged"
    PROBED = "probed"
    CLASSIFIED = "classified"
    REMUXED = "remuxed"
    PUBLISHED = "published"
    CLEANED = "cleaned"
    FAILED = "failed"


class PipelineStage(str, Enum):
    """Pipeline stage that can fail."""
    STAGE = "stage"
    PROBE = "probe"
    REMUX = "remux"
    PUBLISH = "publish"


class Orientation(str, Enum):
    """Coarse aspect-ratio bucket used as storage key prefix."""
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    OTHER = "other"


class MediaAsset(BaseModel):
    """Incoming upload admitted for processing."""

    asset_id: str
    size_bytes: int
    content_type: str


class StagedFile(BaseModel):
    """Upload written to local disk, owned by one pipeline run."""

    path: Path
    size_bytes: int


class RemuxedFile(BaseModel):
    """Fast-start copy of a staged file, owned by one pipeline run."""

    path: Path
    size_bytes: int


class Geometry(BaseModel):
    """Width and height of the primary video stream in pixels."""

    model_config = ConfigDict(frozen=True)

    width: int
    height: int


class PublishedLocation(BaseModel):
    """Where the processed video lives in object storage."""

    model_config = ConfigDict(frozen=True)

    key: str
    url: str


class PipelineResult(BaseModel):
    """Outcome of a successful pipeline run."""

    asset_id: str
    geometry: Geometry
    orientation: Orientation
    location: PublishedLocation
    processing_time_sec: float = 0.0


class Video(BaseModel):
    """Video metadata record."""

    video_id: str
    title: str
    description: str = ""
    user_id: str | None = None
    thumbnail_url: str | None = None
    video_url: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class VideoCreateRequest(BaseModel):
    """Request body for creating a draft video record."""

    title: str = Field(..., min_length=1)
    description: str = ""
    user_id: str | None = None
