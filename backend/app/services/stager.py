"""
Local temp-file lifecycle for pipeline runs.

Writes incoming uploads to the staging directory and removes staged and
remuxed files when a run ends.
"""

import asyncio
import logging
import shutil
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO

from app.config import Settings
from app.models.schemas import MediaAsset, StagedFile
from app.services.errors import StageWriteFailed
from app.utils.media_utils import remuxed_path_for, staged_path_for

logger = logging.getLogger(__name__)

# Copy buffer for file-like payloads
COPY_CHUNK_SIZE = 1024 * 1024


class FileStager:
    """
    Manages staged files on local disk.

    Example:
        stager = FileStager(settings)
        staged = await stager.stage(asset, payload)
        try:
            ...
        finally:
            stager.release({staged.path, stager.remuxed_path_for(staged.path)})
    """

    def __init__(self, settings: Settings):
        """
        Initialize stager.

        Args:
            settings: Application settings (temp_dir)
        """
        self.settings = settings

    def path_for(self, asset: MediaAsset) -> Path:
        """Get the staging path for an asset."""
        return staged_path_for(self.settings.temp_dir, asset.asset_id)

    def remuxed_path_for(self, staged_path: Path) -> Path:
        """Get the remuxed sibling path of a staged file."""
        return remuxed_path_for(staged_path)

    async def stage(self, asset: MediaAsset, payload: bytes | BinaryIO) -> StagedFile:
        """
        Write the full payload to the staging directory.

        Args:
            asset: Asset being processed (identifier names the file)
            payload: Upload bytes or a readable binary file object

        Returns:
            StagedFile once all bytes are written and the file is closed

        Raises:
            StageWriteFailed: If the file cannot be written
        """
        try:
            path = self.path_for(asset)
        except ValueError as e:
            raise StageWriteFailed(str(e), e)

        try:
            # Write in thread pool to not block event loop
            size = await asyncio.to_thread(self._write, path, payload)
        except OSError as e:
            raise StageWriteFailed(f"Could not write {path}: {e}", e)

        logger.info(f"Staged {asset.asset_id}: {path} ({size / 1024 / 1024:.1f} MB)")
        return StagedFile(path=path, size_bytes=size)

    def _write(self, path: Path, payload: bytes | BinaryIO) -> int:
        """Write payload to path and return the number of bytes written."""
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as f:
            if isinstance(payload, (bytes, bytearray, memoryview)):
                f.write(payload)
            else:
                shutil.copyfileobj(payload, f, COPY_CHUNK_SIZE)

        return path.stat().st_size

    def release(self, paths: Iterable[Path]) -> None:
        """
        Remove every listed path if present.

        Idempotent: already-missing files are not an error. Removal failures
        are logged and swallowed; a leaked temp file is an operational issue,
        not a pipeline failure.

        Args:
            paths: Files to remove
        """
        for path in paths:
            try:
                Path(path).unlink(missing_ok=True)
                logger.debug(f"Released {path}")
            except OSError as e:
                logger.warning(f"Failed to remove temp file {path}: {e}")
