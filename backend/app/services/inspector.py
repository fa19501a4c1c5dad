"""
Video geometry inspection using ffprobe.

Reads width and height of the primary video stream from a local file.
"""

import json
import logging
from pathlib import Path

from app.config import Settings
from app.models.schemas import Geometry
from app.services.errors import ProbeFailed
from app.services.process_runner import ProcessRunner

logger = logging.getLogger(__name__)

# Max chars of ffprobe stderr kept in logs
STDERR_LOG_LIMIT = 500


class VideoInspector:
    """
    Extracts stream geometry with ffprobe.

    Probing is deterministic for a given file, so failures are treated as
    invalid input and never retried.

    Example:
        inspector = VideoInspector(runner, settings)
        geometry = await inspector.probe(Path("/tmp/abc123.mp4"))
    """

    def __init__(self, runner: ProcessRunner, settings: Settings):
        """
        Initialize inspector.

        Args:
            runner: Process runner used to launch ffprobe
            settings: Application settings (ffprobe binary)
        """
        self.runner = runner
        self.settings = settings

    def build_command(self, path: Path) -> list[str]:
        """Build ffprobe arguments for the first video stream's width/height."""
        return [
            self.settings.ffprobe_bin,
            "-v", "error",
            "-select_streams", "v:0",
            "-show_entries", "stream=width,height",
            "-of", "json",
            str(path),
        ]

    async def probe(self, path: Path) -> Geometry:
        """
        Probe a fully written local file.

        Args:
            path: Path to the video file

        Returns:
            Geometry of the primary video stream

        Raises:
            ProbeFailed: If ffprobe fails or its output lacks usable geometry
        """
        try:
            result = await self.runner.run(self.build_command(path))
        except OSError as e:
            raise ProbeFailed(f"Could not launch ffprobe: {e}", e)

        if not result.ok:
            logger.error(
                f"ffprobe failed for {path.name} (code {result.returncode}): "
                f"{result.stderr[:STDERR_LOG_LIMIT]}"
            )
            raise ProbeFailed(
                f"ffprobe error (code {result.returncode}): {result.stderr.strip()}",
                stderr=result.stderr,
            )

        geometry = parse_probe_output(result.stdout)
        logger.info(f"Probed {path.name}: {geometry.width}x{geometry.height}")
        return geometry


def parse_probe_output(output: str) -> Geometry:
    """
    Parse ffprobe JSON output into Geometry.

    Expects {"streams": [{"width": W, "height": H}, ...]} and reads the
    first entry.

    Args:
        output: ffprobe stdout

    Returns:
        Geometry from the first stream

    Raises:
        ProbeFailed: If output is not JSON or has no usable stream
    """
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise ProbeFailed(f"Invalid ffprobe output: {e}", e)

    streams = data.get("streams") if isinstance(data, dict) else None
    if not streams or not isinstance(streams, list):
        raise ProbeFailed("No video streams found")

    stream = streams[0]
    if not isinstance(stream, dict):
        raise ProbeFailed("Malformed video stream entry")

    return Geometry(
        width=_parse_dimension(stream, "width"),
        height=_parse_dimension(stream, "height"),
    )


def _parse_dimension(stream: dict, field: str) -> int:
    """Read an integer dimension from a stream entry."""
    value = stream.get(field)
    if value is None:
        raise ProbeFailed(f"Video stream has no {field}")

    # bool is an int subclass; JSON true/false is not a dimension
    if isinstance(value, bool):
        raise ProbeFailed(f"Video stream {field} is not numeric: {value!r}")

    if isinstance(value, int):
        return value

    if isinstance(value, float) and value.is_integer():
        return int(value)

    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())

    raise ProbeFailed(f"Video stream {field} is not numeric: {value!r}")
