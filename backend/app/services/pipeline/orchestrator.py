"""
Pipeline orchestrator for video ingest.

Sequences staging, probing, classification, remux and publishing for one
upload, and removes local artifacts on every exit path.
"""

import logging
import time
from typing import Awaitable, BinaryIO, TypeVar

from app.config import Settings, get_settings
from app.logging_config import asset_context
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
)
from app.services.classifier import classify
from app.services.errors import (
    ProbeFailed,
    PublishFailed,
    RemuxFailed,
    StageFailed,
    StageWriteFailed,
)
from app.services.inspector import VideoInspector
from app.services.process_runner import AsyncProcessRunner, ProcessRunner
from app.services.publisher import VideoPublisher
from app.services.remuxer import VideoRemuxer
from app.services.stager import FileStager
from app.services.storage import ObjectStorage, S3ObjectStorage

from .progress_manager import ProgressCallback, ProgressManager

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Error raised for an unexpected exception inside each stage
STAGE_ERRORS: dict[PipelineStage, type[StageFailed]] = {
    PipelineStage.STAGE: StageWriteFailed,
    PipelineStage.PROBE: ProbeFailed,
    PipelineStage.REMUX: RemuxFailed,
    PipelineStage.PUBLISH: PublishFailed,
}


class PipelineOrchestrator:
    """
    Pipeline orchestrator for video ingest.

    State machine (no back-edges, each stage runs at most once):

        received -> staged -> probed -> classified -> remuxed -> published -> cleaned

    Any stage may instead end the run in "failed".

    Cleanup of the staged and remuxed files runs exactly once per run, on
    success, on failure and on cancellation, before the result or error
    reaches the caller.

    Example:
        orchestrator = PipelineOrchestrator(settings, storage=storage)
        asset = MediaAsset(asset_id="abc123", size_bytes=len(data), content_type="video/mp4")
        result = await orchestrator.process(asset, data)
        result.location.url
    """

    def __init__(
        self,
        settings: Settings | None = None,
        runner: ProcessRunner | None = None,
        storage: ObjectStorage | None = None,
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            settings: Application settings (uses defaults if None)
            runner: Process runner for ffprobe/ffmpeg (asyncio subprocess if None)
            storage: Object storage collaborator (S3 from settings if None)
        """
        self.settings = settings or get_settings()
        self.runner = runner or AsyncProcessRunner()
        self.storage = storage or S3ObjectStorage.from_settings(self.settings)

        self.stager = FileStager(self.settings)
        self.inspector = VideoInspector(self.runner, self.settings)
        self.remuxer = VideoRemuxer(self.runner, self.settings)
        self.publisher = VideoPublisher(self.storage, self.settings)
        self.progress_manager = ProgressManager()

    async def process(
        self,
        asset: MediaAsset,
        payload: bytes | BinaryIO,
        progress_callback: ProgressCallback | None = None,
    ) -> PipelineResult:
        """
        Run one upload through the full pipeline.

        Stages:
        1. Stage upload to local disk -> StagedFile
        2. Probe geometry -> Geometry
        3. Classify -> Orientation
        4. Remux for fast start -> RemuxedFile
        5. Publish to object storage -> PublishedLocation
        6. Remove staged and remuxed files

        Log records emitted during the run carry the asset id.

        Args:
            asset: Upload being processed
            payload: Upload bytes or readable binary file object
            progress_callback: Optional async callback for state transitions

        Returns:
            PipelineResult with geometry, orientation and published location

        Raises:
            StageFailed: Subclass identifying the failed stage and its cause
        """
        token = asset_context.set(asset.asset_id)
        try:
            return await self._process(asset, payload, progress_callback)
        finally:
            asset_context.reset(token)

    async def _process(
        self,
        asset: MediaAsset,
        payload: bytes | BinaryIO,
        progress_callback: ProgressCallback | None,
    ) -> PipelineResult:
        """Run the pipeline with the asset bound to the log context."""
        started_at = time.monotonic()

        try:
            staged_path = self.stager.path_for(asset)
        except ValueError as e:
            raise StageWriteFailed(str(e), e)
        artifacts = {staged_path, self.stager.remuxed_path_for(staged_path)}

        await self.progress_manager.update_progress(
            progress_callback,
            ProcessingStatus.RECEIVED,
            f"Received: {asset.asset_id} ({asset.size_bytes / 1024 / 1024:.1f} MB)",
        )

        try:
            try:
                geometry, orientation, location = await self._run_stages(
                    asset, payload, progress_callback
                )
            finally:
                self.stager.release(artifacts)
        except StageFailed as e:
            logger.error(
                f"Pipeline failed for {asset.asset_id} at {e.stage.value}: {e.message}"
            )
            await self.progress_manager.update_progress(
                progress_callback,
                ProcessingStatus.FAILED,
                str(e),
                progress=0,
            )
            raise

        await self.progress_manager.update_progress(
            progress_callback,
            ProcessingStatus.CLEANED,
            f"Cleaned up: {asset.asset_id}",
        )

        processing_time = time.monotonic() - started_at
        logger.info(
            f"Pipeline complete: {asset.asset_id} -> {location.key}, "
            f"{processing_time:.1f}s"
        )

        return PipelineResult(
            asset_id=asset.asset_id,
            geometry=geometry,
            orientation=orientation,
            location=location,
            processing_time_sec=processing_time,
        )

    async def _run_stages(
        self,
        asset: MediaAsset,
        payload: bytes | BinaryIO,
        progress_callback: ProgressCallback | None,
    ) -> tuple[Geometry, Orientation, PublishedLocation]:
        """Execute stages in order. Cleanup is the caller's job."""
        staged: StagedFile = await self._call(
            PipelineStage.STAGE, self.stager.stage(asset, payload)
        )
        await self.progress_manager.update_progress(
            progress_callback,
            ProcessingStatus.STAGED,
            f"Staged: {staged.path.name}",
        )

        geometry: Geometry = await self._call(
            PipelineStage.PROBE, self.inspector.probe(staged.path)
        )
        await self.progress_manager.update_progress(
            progress_callback,
            ProcessingStatus.PROBED,
            f"Probed: {geometry.width}x{geometry.height}",
        )

        orientation = classify(geometry)
        await self.progress_manager.update_progress(
            progress_callback,
            ProcessingStatus.CLASSIFIED,
            f"Classified: {orientation.value}",
        )

        remuxed_path = await self._call(
            PipelineStage.REMUX, self.remuxer.remux(staged.path)
        )
        remuxed = RemuxedFile(path=remuxed_path, size_bytes=remuxed_path.stat().st_size)
        await self.progress_manager.update_progress(
            progress_callback,
            ProcessingStatus.REMUXED,
            f"Remuxed: {remuxed.path.name}",
        )

        location: PublishedLocation = await self._call(
            PipelineStage.PUBLISH,
            self.publisher.publish(
                remuxed.path, orientation, asset.asset_id, asset.content_type
            ),
        )
        await self.progress_manager.update_progress(
            progress_callback,
            ProcessingStatus.PUBLISHED,
            f"Published: {location.key}",
        )

        return geometry, orientation, location

    async def _call(self, stage: PipelineStage, operation: Awaitable[T]) -> T:
        """Await a stage, mapping unexpected exceptions to that stage's error."""
        try:
            return await operation
        except StageFailed:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error in {stage.value} stage")
            raise STAGE_ERRORS[stage](f"Unexpected error: {e}", e)
