"""Business logic for file upload and download."""

import logging
from contextlib import ExitStack
from dataclasses import dataclass, field
from types import TracebackType
from typing import BinaryIO, Self, final

from django.db import transaction

from server.apps.drive.config import DriveConfig, get_drive_config
from server.apps.drive.exceptions import BlobNotFoundError, QuotaExceededError
from server.apps.drive.infrastructure.blobs import BlobStore, get_blob_store
from server.apps.drive.infrastructure.metadata import (
    clean_item_name,
    content_disposition,
    detect_mime_type,
)
from server.apps.drive.logic.catalog import (
    ItemKind,
    find_item,
    find_parent_folder,
    insert_file,
)
from server.apps.drive.logic.quota_operations import check_quota
from server.apps.drive.models import File

logger = logging.getLogger(__name__)


def upload_file(
    stream: BinaryIO,
    name: str,
    parent_id: object = None,
    *,
    blob_store: BlobStore | None = None,
    config: DriveConfig | None = None,
) -> File:
    """Upload file to the blob store and create its catalog record.

    Order is fixed: write the blob first, then insert the record. If
    anything after the blob write fails or the call is interrupted
    before the record is committed, the blob is discarded so no orphan
    is left behind and no record points at partial content.

    Args:
        stream: Binary stream with file content.
        name: Display name of the file.
        parent_id: Containing folder id; None for root.
        blob_store: Blob store; the configured one when omitted.
        config: Drive configuration; the app's when omitted.

    Returns:
        Created File instance.

    Raises:
        InvalidItemError: If name or parent id is invalid.
        ItemNotFoundError: If the parent folder is missing or in trash.
        BlobWriteError: If the blob store rejects the write.
        QuotaExceededError: If enforcement is on and the file won't fit.
    """
    config = config or get_drive_config()
    store = blob_store or get_blob_store()

    # Validate before writing bytes so bad requests leave nothing behind
    display_name = clean_item_name(name)
    parent = find_parent_folder(parent_id)

    # Step 1: Write blob
    blob = store.save(stream, display_name)

    recorded = False
    try:
        # Step 2: Enforce quota now that the real size is known
        if config.enforce_quota:
            check_quota(blob.size, config=config)

        # Step 3: Create catalog record (in transaction)
        with transaction.atomic():
            file_instance = insert_file(
                name=display_name,
                size_bytes=blob.size,
                storage_key=blob.key,
                parent=parent,
                mime_type=detect_mime_type(display_name),
            )
        recorded = True
    except QuotaExceededError:
        raise
    except Exception:
        logger.exception('Upload failed after blob write: %s', blob.key)
        raise
    finally:
        # Rollback: nothing references the blob unless the record exists
        if not recorded:
            store.discard(blob.key)

    logger.info(
        'File uploaded: %s (ID: %d, size: %d)',
        file_instance.name,
        file_instance.id,
        file_instance.size_bytes,
    )
    return file_instance


@final
@dataclass
class Download:
    """Open download: the file record plus its blob stream.

    Use as a context manager; the stream is closed on exit.
    """

    file: File
    stream: BinaryIO
    disposition: str
    _resources: ExitStack = field(default_factory=ExitStack, repr=False)

    @property
    def filename(self) -> str:
        """Suggested filename for attachment mode."""
        return self.file.name

    @property
    def size(self) -> int:
        """Content length in bytes."""
        return self.file.size_bytes

    @property
    def mime_type(self) -> str:
        """Content type guessed at upload."""
        return self.file.mime_type

    def close(self) -> None:
        """Release the blob stream."""
        self._resources.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


def open_download(
    file_id: object,
    *,
    as_attachment: bool = False,
    blob_store: BlobStore | None = None,
) -> Download:
    """Open a live file's content for reading.

    Args:
        file_id: File identifier.
        as_attachment: Attachment (download) instead of inline (preview).
        blob_store: Blob store; the configured one when omitted.

    Returns:
        Download holding the open stream; close it when done.

    Raises:
        ItemNotFoundError: If the file is missing or in trash.
        BlobNotFoundError: If the record's blob is missing.
        BlobReadError: If the blob exists but cannot be opened.
    """
    file_instance: File = find_item(file_id, ItemKind.FILE)  # type: ignore[assignment]
    store = blob_store or get_blob_store()

    resources = ExitStack()
    try:
        stream = resources.enter_context(store.open(file_instance.storage_key))
    except BlobNotFoundError:
        logger.error(
            'Dangling metadata: file %d references missing blob %s',
            file_instance.id,
            file_instance.storage_key,
        )
        raise

    logger.debug('Opened download for file %d', file_instance.id)
    return Download(
        file=file_instance,
        stream=stream,
        disposition=content_disposition(
            file_instance.name,
            as_attachment=as_attachment,
        ),
        _resources=resources,
    )
