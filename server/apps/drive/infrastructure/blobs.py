"""Blob store: raw bytes behind opaque keys.

The blob store knows nothing about names, folders or trash. It is the
seam that lets the backend change (local disk, S3) without touching
callers: everything above this module sees only ``BlobStore``.
"""

import io
import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import BinaryIO, NamedTuple, Protocol, final, override

from django.core.files.base import File as DjangoFile
from django.core.files.storage import Storage, default_storage

from server.apps.drive.config import get_drive_config
from server.apps.drive.exceptions import (
    BlobNotFoundError,
    BlobReadError,
    BlobWriteError,
)
from server.apps.drive.infrastructure.metadata import build_blob_key

logger = logging.getLogger(__name__)


class StoredBlob(NamedTuple):
    """Result of a successful blob write."""

    key: str
    size: int


class BlobStore(Protocol):
    """Capability interface for blob persistence."""

    def save(self, stream: BinaryIO, suggested_name: str) -> StoredBlob:
        """Persist the whole stream under a new key."""

    def open(self, key: str) -> AbstractContextManager[BinaryIO]:
        """Open a blob for reading; closed when the context exits."""

    def exists(self, key: str) -> bool:
        """Whether the key resolves to stored content."""

    def discard(self, key: str) -> None:
        """Best-effort delete used for compensation."""

    def keys(self) -> Iterator[str]:
        """Enumerate stored keys."""


class _CountingReader(io.RawIOBase):
    """Read-only, non-seekable wrapper counting bytes pulled from source."""

    def __init__(self, source: BinaryIO) -> None:
        self._source = source
        self.bytes_read = 0

    @override
    def readable(self) -> bool:
        return True

    @override
    def readinto(self, buffer: bytearray | memoryview) -> int:  # type: ignore[override]
        chunk = self._source.read(len(buffer))
        if not chunk:
            return 0
        size = len(chunk)
        buffer[:size] = chunk
        self.bytes_read += size
        return size


@final
class StorageBlobStore:
    """Blob store backed by any Django storage backend.

    Keys are generated per write (see ``build_blob_key``), so two
    uploads never share a key even when their names are equal.
    """

    def __init__(self, storage: Storage, prefix: str = 'blobs') -> None:
        """Initialize blob store.

        Args:
            storage: Django storage backend holding the bytes.
            prefix: Key namespace inside the storage.
        """
        self._storage = storage
        self._prefix = prefix.strip('/')

    @property
    def storage(self) -> Storage:
        """Underlying Django storage backend."""
        return self._storage

    def save(self, stream: BinaryIO, suggested_name: str) -> StoredBlob:
        """Persist every byte of the stream under a new key.

        The stream is consumed to the end. If anything fails midway
        (medium rejects the write, the source raises, the caller is
        cancelled) the partially written key is discarded.

        Args:
            stream: Binary stream to persist.
            suggested_name: User-supplied filename, used as a key hint.

        Returns:
            Storage key and exact number of bytes written.

        Raises:
            BlobWriteError: If the write fails.
        """
        key = build_blob_key(self._prefix, suggested_name)
        reader = _CountingReader(stream)
        saved = False
        try:
            logger.info('Writing blob: %s', key)
            saved_key = self._storage.save(key, DjangoFile(reader, name=key))
            saved = True
        except Exception as exc:
            logger.exception('Failed to write blob: %s', key)
            raise BlobWriteError(key) from exc
        finally:
            if not saved:
                self.discard(key)

        logger.info('Blob written: %s (%d bytes)', saved_key, reader.bytes_read)
        return StoredBlob(key=saved_key, size=reader.bytes_read)

    @contextmanager
    def open(self, key: str) -> Iterator[BinaryIO]:
        """Open a blob for reading.

        The stream is closed on every exit path, including errors
        raised while the caller reads it.

        Args:
            key: Storage key returned by ``save``.

        Yields:
            Readable binary stream.

        Raises:
            BlobNotFoundError: If the key does not resolve to content.
            BlobReadError: If existing content cannot be opened.
        """
        try:
            blob = self._storage.open(key, 'rb')
        except FileNotFoundError as exc:
            raise BlobNotFoundError(key) from exc
        except Exception as exc:
            logger.exception('Failed to open blob: %s', key)
            raise BlobReadError(key) from exc

        try:
            yield blob
        finally:
            blob.close()

    def exists(self, key: str) -> bool:
        """Check whether the key resolves to stored content."""
        return bool(key) and self._storage.exists(key)

    def discard(self, key: str) -> None:
        """Delete a blob, logging instead of raising on failure.

        Used to compensate for failed uploads. If deletion fails, the
        blob stays orphaned; ``verify_storage --orphans`` reports it.

        Args:
            key: Storage key to delete.
        """
        try:
            if self._storage.exists(key):
                logger.warning('Discarding blob: %s', key)
                self._storage.delete(key)
        except Exception:
            logger.exception('Failed to discard blob (orphaned): %s', key)

    def keys(self) -> Iterator[str]:
        """Enumerate every key under the store prefix.

        Yields:
            Storage keys.
        """
        yield from self._walk(self._prefix)

    def _walk(self, directory: str) -> Iterator[str]:
        try:
            subdirectories, filenames = self._storage.listdir(directory)
        except FileNotFoundError:
            return
        for filename in filenames:
            yield f'{directory}/{filename}' if directory else filename
        for subdirectory in subdirectories:
            child = f'{directory}/{subdirectory}' if directory else subdirectory
            yield from self._walk(child)


def get_blob_store() -> StorageBlobStore:
    """Get the blob store over the configured default storage.

    Returns:
        StorageBlobStore wrapping ``STORAGES['default']``.
    """
    return StorageBlobStore(
        default_storage,  # type: ignore[arg-type]
        prefix=get_drive_config().blob_prefix,
    )
