"""S3 repository for defect screenshots."""

from __future__ import annotations

from enum import Enum
import io
from threading import Lock
from typing import Callable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from utils.error_handling import ObjectStoreError
from utils.logging_config import get_logger

logger = get_logger(__name__)

IMAGE_KEY_PREFIX = "images/"
# Every screenshot is tagged as JPEG whatever the source format was.
UPLOAD_CONTENT_TYPE = "image/jpeg"


def image_key(ticket_id: str) -> str:
    """Object key for a ticket's image; recoverable from the ticket id alone."""
    return f"{IMAGE_KEY_PREFIX}{ticket_id}"


class UploadState(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class UploadProgress:
    """
    Progress tracker passed to boto3 as the transfer ``Callback``.

    boto3 calls it from its transfer threads with the number of bytes sent
    since the last call, so updates are serialized with a lock. An optional
    listener receives ``(state, percent)`` on every change.
    """

    def __init__(
        self,
        total_bytes: int,
        key: str,
        listener: Optional[Callable[[UploadState, float], None]] = None,
    ):
        self.total_bytes = total_bytes
        self.key = key
        self.bytes_transferred = 0
        self.state = UploadState.QUEUED
        self._listener = listener
        self._lock = Lock()

    @property
    def percent(self) -> float:
        if not self.total_bytes:
            return 100.0 if self.state is UploadState.COMPLETED else 0.0
        return self.bytes_transferred / self.total_bytes * 100

    def __call__(self, bytes_amount: int) -> None:
        with self._lock:
            self.bytes_transferred += bytes_amount
            self.state = UploadState.RUNNING
            logger.debug(
                "Upload is running",
                extra={"key": self.key, "progress_pct": round(self.percent, 1)},
            )
            self._notify()

    def finish(self, state: UploadState) -> None:
        with self._lock:
            self.state = state
            self._notify()

    def _notify(self) -> None:
        if self._listener is not None:
            self._listener(self.state, self.percent)


class S3Repository:
    """Upload defect images and resolve their URLs."""

    def __init__(self, bucket_name: str, base_url: Optional[str] = None):
        self.bucket_name = bucket_name
        self.base_url = base_url.rstrip("/") if base_url else None
        self.client = boto3.client("s3")

    def upload_image(
        self,
        key: str,
        data: bytes,
        progress: Optional[UploadProgress] = None,
    ) -> None:
        """Upload image bytes under ``key``, reporting to ``progress`` if given."""
        if progress is None:
            progress = UploadProgress(len(data), key)
        try:
            self.client.upload_fileobj(
                io.BytesIO(data),
                self.bucket_name,
                key,
                ExtraArgs={"ContentType": UPLOAD_CONTENT_TYPE},
                Callback=progress,
            )
        except (BotoCoreError, ClientError) as exc:
            progress.finish(UploadState.FAILED)
            raise ObjectStoreError(f"Upload of {key} failed: {exc}") from exc
        progress.finish(UploadState.COMPLETED)

    def get_download_url(self, key: str) -> str:
        """
        Return a durable URL for an uploaded object.

        The object is checked with HEAD first so a URL is never handed out for
        something that is not in the bucket.
        """
        try:
            self.client.head_object(Bucket=self.bucket_name, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise ObjectStoreError(f"Image {key} is not available: {exc}") from exc

        if self.base_url:
            return f"{self.base_url}/{key}"
        region = self.client.meta.region_name
        return f"https://{self.bucket_name}.s3.{region}.amazonaws.com/{key}"
