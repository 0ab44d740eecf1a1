"""Metadata helpers for files and blob keys."""

import mimetypes
import re
import uuid
from pathlib import Path
from typing import Final

from django.utils.http import content_disposition_header

from server.apps.drive.exceptions import InvalidItemError

_NAME_MAX_LENGTH: Final = 255
_SAFE_EXTENSION: Final = re.compile(r'^[a-z0-9]{1,16}$')
_DEFAULT_MIME_TYPE: Final = 'application/octet-stream'


def detect_mime_type(filename: str) -> str:
    """Detect MIME type from filename.

    Uses Python's built-in mimetypes module to guess MIME type
    from filename extension.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return _DEFAULT_MIME_TYPE
    return mime_type


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Extension without dot, lowercase (e.g., 'pdf').
        Returns empty string if no extension.
    """
    extension = Path(filename).suffix
    return extension.lstrip('.').lower()


def build_blob_key(prefix: str, suggested_name: str) -> str:
    """Generate a collision-free storage key.

    Keys are random, fanned out by their first two characters, and
    keep a sanitized extension from the suggested name as a hint for
    humans browsing the bucket. Callers must not parse them.

    Example: ('blobs', 'report.PDF') -> 'blobs/3f/3fa2...c1.pdf'

    Args:
        prefix: Key namespace inside the storage.
        suggested_name: User-supplied filename.

    Returns:
        New storage key.
    """
    token = uuid.uuid4().hex
    extension = get_file_extension(suggested_name)
    filename = token
    if _SAFE_EXTENSION.match(extension):
        filename = f'{token}.{extension}'
    return '/'.join(
        part for part in (prefix.strip('/'), token[:2], filename) if part
    )


def clean_item_name(name: str | None) -> str:
    """Validate and normalize a display name.

    Args:
        name: User-supplied file or folder name.

    Returns:
        Name with surrounding whitespace removed.

    Raises:
        InvalidItemError: If the name is missing, blank or too long.
    """
    cleaned = (name or '').strip()
    if not cleaned:
        raise InvalidItemError('Name cannot be empty')
    if len(cleaned) > _NAME_MAX_LENGTH:
        raise InvalidItemError(
            f'Name cannot be longer than {_NAME_MAX_LENGTH} characters',
        )
    return cleaned


def content_disposition(filename: str, *, as_attachment: bool) -> str:
    """Build a Content-Disposition value for a download.

    Both modes carry the filename, e.g. 'inline; filename="photo.jpg"'.
    A bare 'inline' is returned only when the filename is empty.

    Args:
        filename: Display name of the file.
        as_attachment: Attachment (download) instead of inline (preview).

    Returns:
        Header value, e.g. 'attachment; filename="report.pdf"'.
    """
    return content_disposition_header(as_attachment, filename) or 'inline'
