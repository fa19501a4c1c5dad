"""
Amazon S3 storage implementation.

Uploads processed videos with boto3, retrying transient transport errors.
"""

import asyncio
import logging
import threading
from pathlib import Path

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.config import Settings
from app.services.storage.base import StorageError

logger = logging.getLogger(__name__)

# Transport errors worth another attempt; ClientError (auth, missing bucket) is not
TRANSIENT_ERRORS = (
    EndpointConnectionError,
    ConnectionClosedError,
    ConnectTimeoutError,
    ReadTimeoutError,
)


class UploadCancelled(Exception):
    """Raised from the transfer progress callback to abort an upload."""


class S3ObjectStorage:
    """
    ObjectStorage backed by an S3 bucket.

    boto3 calls block, so uploads run in the default thread pool.

    Example:
        storage = S3ObjectStorage.from_settings(settings)
        await storage.put("landscape/abc123.mp4", path, "video/mp4")
    """

    def __init__(
        self,
        client,
        bucket: str,
        max_attempts: int = 3,
        wait_min: float = 1.0,
        wait_max: float = 30.0,
    ):
        """
        Initialize S3 storage.

        Args:
            client: boto3 S3 client
            bucket: Target bucket name
            max_attempts: Upload attempts for transient errors
            wait_min: Minimum backoff between attempts (seconds)
            wait_max: Maximum backoff between attempts (seconds)
        """
        self.client = client
        self.bucket = bucket
        self.max_attempts = max(1, max_attempts)
        self.wait_min = wait_min
        self.wait_max = wait_max

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStorage":
        """
        Create S3ObjectStorage from application settings.

        Args:
            settings: Application settings

        Returns:
            Configured S3ObjectStorage instance
        """
        client = boto3.client(
            "s3",
            region_name=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url,
        )
        return cls(
            client=client,
            bucket=settings.s3_bucket,
            max_attempts=settings.storage_max_attempts,
        )

    async def put(self, key: str, path: Path, content_type: str) -> None:
        """
        Upload a local file to the bucket.

        The transfer runs in a worker thread. If the calling task is
        cancelled, the transfer is told to stop at its next progress callback
        and put() waits for the thread to finish before re-raising, so the
        caller never deletes a file that is still being read. An object whose
        last bytes were already sent may still land in the bucket.

        Args:
            key: Object key
            path: Local file to upload
            content_type: MIME type stored as the object's Content-Type

        Raises:
            StorageError: If the upload fails after all attempts
        """
        path = Path(path)
        size_mb = path.stat().st_size / 1024 / 1024 if path.exists() else 0.0
        logger.info(f"Uploading {path.name} ({size_mb:.1f} MB) to s3://{self.bucket}/{key}")

        cancel_event = threading.Event()
        upload = asyncio.ensure_future(
            asyncio.to_thread(self._upload_with_retry, key, path, content_type, cancel_event)
        )

        try:
            await asyncio.shield(upload)
        except asyncio.CancelledError:
            cancel_event.set()
            logger.warning(f"Cancelled, stopping upload of s3://{self.bucket}/{key}")
            await asyncio.wait([upload])
            if not upload.cancelled() and upload.exception() is None:
                logger.warning(f"Upload of s3://{self.bucket}/{key} finished before it could stop")
            raise

        logger.info(f"Uploaded s3://{self.bucket}/{key}")

    def _upload_with_retry(
        self,
        key: str,
        path: Path,
        content_type: str,
        cancel_event: threading.Event,
    ) -> None:
        """Run upload_file, retrying transient transport errors."""
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=self.wait_min, max=self.wait_max),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            before_sleep=self._log_retry,
            sleep=cancel_event.wait,
            reraise=True,
        )

        def check_cancelled(bytes_sent: int) -> None:
            if cancel_event.is_set():
                raise UploadCancelled(key)

        try:
            for attempt in retrying:
                with attempt:
                    check_cancelled(0)
                    self.client.upload_file(
                        str(path),
                        self.bucket,
                        key,
                        ExtraArgs={"ContentType": content_type},
                        Callback=check_cancelled,
                    )
        except (BotoCoreError, ClientError, S3UploadFailedError) as e:
            raise StorageError(f"S3 upload failed: {e}", key=key, original_error=e)
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}", key=key, original_error=e)

    def _log_retry(self, retry_state) -> None:
        """Log a failed attempt before tenacity sleeps."""
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"S3 upload attempt {retry_state.attempt_number}/{self.max_attempts} "
            f"failed: {error}"
        )
