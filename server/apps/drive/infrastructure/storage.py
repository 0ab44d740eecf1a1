"""Custom storage backend for S3-compatible storage."""

import logging
from typing import Any, final, override

from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)


@final
class DriveS3Storage(S3Storage):
    """S3 storage backend for drive blobs (MinIO, R2, AWS).

    Extends django-storages S3Storage with logging around writes and
    deletes. Selected through ``STORAGES['default']``.
    """

    @override
    def save(
        self,
        name: str | None,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save blob to S3 with error logging.

        Args:
            name: Storage key for the blob.
            content: Blob content (file-like object).
            max_length: Optional maximum length for the key.

        Returns:
            Actual storage key used.

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.debug('Uploading blob to S3: %s', name)
            saved_name = super().save(name, content, max_length)
        except Exception:
            logger.exception('Failed to upload blob to S3: %s', name)
            raise
        else:
            logger.debug('Uploaded blob to S3: %s', saved_name)
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete blob from S3 with error logging.

        Args:
            name: Storage key of blob to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.debug('Deleting blob from S3: %s', name)
            super().delete(name)
        except Exception:
            logger.exception('Failed to delete blob from S3: %s', name)
            raise
