"""
Container remux service using ffmpeg.

Rewrites an MP4 for progressive playback (moov atom moved to the front)
without re-encoding audio or video.
"""

import logging
from pathlib import Path

from app.config import Settings
from app.services.errors import RemuxFailed
from app.services.process_runner import ProcessRunner
from app.utils.media_utils import remuxed_path_for

logger = logging.getLogger(__name__)

STDERR_LOG_LIMIT = 500


class VideoRemuxer:
    """
    Produces a fast-start copy of a video next to the original.

    Example:
        remuxer = VideoRemuxer(runner, settings)
        output_path = await remuxer.remux(Path("/tmp/abc123.mp4"))
        # -> /tmp/abc123.mp4.processed.mp4
    """

    def __init__(self, runner: ProcessRunner, settings: Settings):
        """
        Initialize remuxer.

        Args:
            runner: Process runner used to launch ffmpeg
            settings: Application settings (ffmpeg binary)
        """
        self.runner = runner
        self.settings = settings

    def build_command(self, input_path: Path, output_path: Path) -> list[str]:
        """Build ffmpeg arguments for a codec-copy fast-start remux."""
        return [
            self.settings.ffmpeg_bin,
            "-i", str(input_path),
            "-movflags", "faststart",  # Index at file start
            "-map_metadata", "0",      # Keep source metadata
            "-codec", "copy",          # No re-encode
            "-f", "mp4",
            "-y",                      # Overwrite leftovers from an aborted run
            str(output_path),
        ]

    async def remux(self, input_path: Path) -> Path:
        """
        Remux a staged video for fast start.

        Args:
            input_path: Path to the staged video

        Returns:
            Path to the remuxed file, fully written once this returns

        Raises:
            RemuxFailed: If ffmpeg cannot be launched or exits non-zero.
                A partial output file may exist at remuxed_path_for(input_path)
                and must be cleaned up by the caller.
        """
        input_path = Path(input_path)
        output_path = remuxed_path_for(input_path)

        logger.info(f"Remuxing: {input_path.name} -> {output_path.name}")

        try:
            result = await self.runner.run(self.build_command(input_path, output_path))
        except OSError as e:
            raise RemuxFailed(f"Could not launch ffmpeg: {e}", e)

        if not result.ok:
            logger.error(
                f"ffmpeg failed for {input_path.name} (code {result.returncode}): "
                f"{result.stderr[:STDERR_LOG_LIMIT]}"
            )
            raise RemuxFailed(
                f"ffmpeg error (code {result.returncode}): {result.stderr.strip()}",
                stderr=result.stderr,
            )

        if not output_path.exists():
            raise RemuxFailed("Remux failed: output file not created")

        size_mb = output_path.stat().st_size / 1024 / 1024
        logger.info(f"Remuxed: {output_path.name} ({size_mb:.1f} MB)")

        return output_path
