"""Exceptions for drive app.

Every error carries a stable ``kind`` tag and a status code so the
request boundary can translate it without inspecting the class tree.
"""

from typing import ClassVar


class DriveError(Exception):
    """Base class for all drive errors."""

    kind: ClassVar[str] = 'error'
    status_code: ClassVar[int] = 500

    def to_payload(self) -> dict[str, str]:
        """Structured error for the caller.

        Returns:
            Dictionary with ``kind`` and human-readable ``message``.
        """
        return {'kind': self.kind, 'message': str(self)}


class InvalidItemError(DriveError):
    """Raised for malformed input: blank name, unparsable id, bad kind."""

    kind = 'validation'
    status_code = 400


class NotFoundError(DriveError):
    """Raised when a referenced item or blob does not exist."""

    kind = 'not_found'
    status_code = 404


class ItemNotFoundError(NotFoundError):
    """Raised when a file or folder is absent or filtered out."""

    def __init__(self, item_kind: str, item_id: object) -> None:
        """Initialize ItemNotFoundError.

        Args:
            item_kind: 'file' or 'folder'.
            item_id: Identifier that was looked up.
        """
        self.item_kind = item_kind
        self.item_id = item_id
        super().__init__(f'{str(item_kind).capitalize()} not found: {item_id}')


class BlobNotFoundError(NotFoundError):
    """Raised when a storage key does not resolve to stored content.

    The key is kept on the instance for logs; it is never part of the
    message shown to callers.
    """

    def __init__(self, key: str) -> None:
        """Initialize BlobNotFoundError.

        Args:
            key: Storage key that could not be resolved.
        """
        self.key = key
        super().__init__('File content not found')


class BlobWriteError(DriveError):
    """Raised when the blob store rejects a write."""

    kind = 'write_failure'

    def __init__(self, key: str) -> None:
        """Initialize BlobWriteError.

        Args:
            key: Storage key the write was aimed at.
        """
        self.key = key
        super().__init__('Failed to store file content')


class BlobReadError(DriveError):
    """Raised when an existing blob cannot be opened for reading.

    Indicates the catalog and the blob store disagree. Callers see the
    same status as a missing item; the distinct kind is for logs.
    """

    kind = 'read_failure'
    status_code = 404

    def __init__(self, key: str) -> None:
        """Initialize BlobReadError.

        Args:
            key: Storage key that failed to open.
        """
        self.key = key
        super().__init__('Could not read file content')


class QuotaExceededError(DriveError):
    """Raised when upload would exceed the storage quota."""

    kind = 'quota_exceeded'
    status_code = 413

    def __init__(
        self,
        quota_bytes: int,
        used_bytes: int,
        required_bytes: int,
    ) -> None:
        """Initialize QuotaExceededError.

        Args:
            quota_bytes: Total quota limit in bytes.
            used_bytes: Currently used bytes.
            required_bytes: Bytes needed for the operation.
        """
        self.quota_bytes = quota_bytes
        self.used_bytes = used_bytes
        self.required_bytes = required_bytes

        available = max(0, quota_bytes - used_bytes)
        super().__init__(
            f'Quota exceeded: need {required_bytes} bytes, '
            f'only {available} bytes available '
            f'(quota: {quota_bytes}, used: {used_bytes})',
        )
