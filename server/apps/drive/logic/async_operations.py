"""Async entry points for cooperative hosts.

Blob and catalog I/O is blocking; these wrappers run it on a worker
thread through ``asgiref`` so an event loop is never blocked.
"""

from typing import Any, BinaryIO

from asgiref.sync import sync_to_async

from server.apps.drive.logic.file_operations import (
    Download,
    open_download,
    upload_file,
)
from server.apps.drive.logic.quota_operations import QuotaUsage, get_quota
from server.apps.drive.logic.views import BrowseResult, View, browse
from server.apps.drive.models import File


async def aupload_file(
    stream: BinaryIO,
    name: str,
    parent_id: object = None,
    **options: Any,
) -> File:
    """Async version of ``upload_file``."""
    return await sync_to_async(upload_file)(stream, name, parent_id, **options)


async def aopen_download(file_id: object, **options: Any) -> Download:
    """Async version of ``open_download``.

    Reads from the returned stream are still blocking; wrap them with
    ``sync_to_async`` as well.
    """
    return await sync_to_async(open_download)(file_id, **options)


async def abrowse(
    view: View | str | None = None,
    parent_id: object = None,
    **options: Any,
) -> BrowseResult:
    """Async version of ``browse``."""
    return await sync_to_async(browse)(view, parent_id, **options)


async def aget_quota(**options: Any) -> QuotaUsage:
    """Async version of ``get_quota``."""
    return await sync_to_async(get_quota)(**options)
