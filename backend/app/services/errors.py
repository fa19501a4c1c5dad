"""
Error taxonomy for the video ingest pipeline.

Every stage failure is a StageFailed carrying the stage that failed and the
underlying cause. Subclasses exist per stage so callers can catch narrowly:

    StageFailed
    ├── StageWriteFailed   (writing the upload to local disk)
    ├── ProbeFailed        (ffprobe)
    ├── RemuxFailed        (ffmpeg)
    └── PublishFailed      (object storage upload)
"""

from app.models.schemas import PipelineStage


class StageFailed(Exception):
    """Error during pipeline stage execution.

    Attributes:
        stage: Pipeline stage that failed
        message: Error description
        cause: Original exception (if any)
        stderr: Captured diagnostic output of an external process (if any)
    """

    stage: PipelineStage

    def __init__(
        self,
        stage: PipelineStage,
        message: str,
        cause: Exception | None = None,
        stderr: str | None = None,
    ):
        self.stage = stage
        self.message = message
        self.cause = cause
        self.stderr = stderr
        super().__init__(f"[{stage.value}] {message}")


class StageWriteFailed(StageFailed):
    """Upload could not be written to the staging directory."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(PipelineStage.STAGE, message, cause)


class ProbeFailed(StageFailed):
    """ffprobe exited non-zero or returned unusable output."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        stderr: str | None = None,
    ):
        super().__init__(PipelineStage.PROBE, message, cause, stderr)


class RemuxFailed(StageFailed):
    """ffmpeg exited non-zero while rewriting the container."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        stderr: str | None = None,
    ):
        super().__init__(PipelineStage.REMUX, message, cause, stderr)


class PublishFailed(StageFailed):
    """Storage collaborator rejected or failed the upload."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(PipelineStage.PUBLISH, message, cause)
