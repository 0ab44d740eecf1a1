"""Metadata catalog: authoritative record of files and folders.

Every query here names its trash policy. Nothing in this module removes
rows or touches the blob store.
"""

import enum
import logging
from datetime import datetime
from typing import Final, Self

from django.core.exceptions import ValidationError
from django.db.models import QuerySet, Sum

from server.apps.drive.exceptions import InvalidItemError, ItemNotFoundError
from server.apps.drive.models import CatalogQuerySet, File, Folder

logger = logging.getLogger(__name__)

# Parent tokens that mean "root"
_ROOT_TOKENS: Final = frozenset(('', 'null'))

CatalogEntry = File | Folder


class ItemKind(enum.StrEnum):
    """Kind of catalog item."""

    FILE = 'file'
    FOLDER = 'folder'

    @classmethod
    def parse(cls, raw: object) -> Self:
        """Parse an item kind token.

        Raises:
            InvalidItemError: If the token is not a known kind.
        """
        try:
            return cls(str(raw).strip().lower())
        except ValueError as error:
            raise InvalidItemError(f'Unknown item kind: {raw!r}') from error

    @property
    def model(self) -> type[File] | type[Folder]:
        """Model class storing this kind."""
        if self is ItemKind.FILE:
            return File
        return Folder


def parse_item_id(raw: object) -> int:
    """Parse an item identifier.

    Args:
        raw: Integer or decimal string.

    Returns:
        Positive integer id.

    Raises:
        InvalidItemError: If the value is not a positive integer.
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        item_id = raw
    elif isinstance(raw, str) and raw.strip().isdecimal():
        item_id = int(raw.strip())
    else:
        raise InvalidItemError(f'Invalid item id: {raw!r}')

    if item_id <= 0:
        raise InvalidItemError(f'Invalid item id: {raw!r}')
    return item_id


def parse_parent_id(raw: object) -> int | None:
    """Parse an optional parent folder identifier.

    ``None``, empty string and ``'null'`` all mean root.

    Returns:
        Folder id, or None for root.
    """
    if raw is None:
        return None
    if isinstance(raw, str) and raw.strip().lower() in _ROOT_TOKENS:
        return None
    return parse_item_id(raw)


def _queryset(kind: ItemKind, *, include_trashed: bool) -> CatalogQuerySet:
    objects: CatalogQuerySet = kind.model.objects.all()  # type: ignore[assignment]
    if include_trashed:
        return objects.with_trashed()
    return objects.live()


def find_item(
    item_id: object,
    kind: ItemKind,
    *,
    include_trashed: bool = False,
) -> CatalogEntry:
    """Find a file or folder by id.

    Args:
        item_id: Item identifier (int or decimal string).
        kind: Item kind.
        include_trashed: Also match items in trash.

    Returns:
        File or Folder instance.

    Raises:
        InvalidItemError: If the id cannot be parsed.
        ItemNotFoundError: If absent or excluded by the trash filter.
    """
    pk = parse_item_id(item_id)
    try:
        return _queryset(kind, include_trashed=include_trashed).get(pk=pk)
    except kind.model.DoesNotExist as error:
        raise ItemNotFoundError(kind, pk) from error


def find_parent_folder(parent_id: object) -> Folder | None:
    """Resolve a parent reference to a live folder.

    Returns:
        Folder instance, or None for root.

    Raises:
        ItemNotFoundError: If the folder is missing or in trash.
    """
    pk = parse_parent_id(parent_id)
    if pk is None:
        return None
    return find_item(pk, ItemKind.FOLDER)  # type: ignore[return-value]


def _validate(item: CatalogEntry) -> None:
    try:
        item.full_clean()
    except ValidationError as error:
        messages = '; '.join(
            f'{field}: {" ".join(errors)}'
            for field, errors in error.message_dict.items()
        )
        raise InvalidItemError(messages) from error


def insert_file(
    *,
    name: str,
    size_bytes: int,
    storage_key: str,
    parent: Folder | None = None,
    mime_type: str = 'application/octet-stream',
) -> File:
    """Insert a file record.

    Raises:
        InvalidItemError: If required fields are missing or invalid.
    """
    file_instance = File(
        name=name,
        size_bytes=size_bytes,
        storage_key=storage_key,
        parent=parent,
        mime_type=mime_type,
    )
    _validate(file_instance)
    file_instance.save()
    logger.info(
        'File record created: %s (ID: %d, size: %d)',
        file_instance.name,
        file_instance.id,
        file_instance.size_bytes,
    )
    return file_instance


def insert_folder(*, name: str, parent: Folder | None = None) -> Folder:
    """Insert a folder record.

    Raises:
        InvalidItemError: If required fields are missing or invalid.
    """
    folder = Folder(name=name, parent=parent)
    _validate(folder)
    folder.save()
    logger.info('Folder record created: %s (ID: %d)', folder.name, folder.id)
    return folder


def set_trashed(item: CatalogEntry, trashed_at: datetime | None) -> None:
    """Set or clear the deletion timestamp of one item.

    The row stays in place and the blob store is not touched.
    """
    item.deleted_at = trashed_at
    item.save(update_fields=['deleted_at', 'modified_at'])


def collect_descendant_folder_ids(folder: Folder) -> list[int]:
    """Ids of every folder below ``folder``, trashed ones included."""
    collected: list[int] = []
    pending = [folder.pk]
    while pending:
        pending = list(
            Folder.objects.with_trashed().filter(
                parent_id__in=pending,
            ).values_list('pk', flat=True),
        )
        collected.extend(pending)
    return collected


def collect_trashed_ancestors(item: CatalogEntry) -> list[Folder]:
    """Trashed folders above ``item``, nearest first.

    Stops at the first live ancestor, since a live folder never sits
    below a trashed one.
    """
    ancestors: list[Folder] = []
    parent = item.parent
    while parent is not None and parent.is_trashed:
        ancestors.append(parent)
        parent = parent.parent
    return ancestors


def trash_descendants(folder: Folder, trashed_at: datetime) -> int:
    """Trash every live item below ``folder`` with the same timestamp.

    Returns:
        Number of items trashed.
    """
    folder_ids = collect_descendant_folder_ids(folder)
    folders = Folder.objects.live().filter(pk__in=folder_ids).update(
        deleted_at=trashed_at,
        modified_at=trashed_at,
    )
    files = File.objects.live().filter(
        parent_id__in=[folder.pk, *folder_ids],
    ).update(deleted_at=trashed_at, modified_at=trashed_at)
    return folders + files


def restore_descendants(
    folder: Folder,
    trashed_at: datetime,
    restored_at: datetime,
) -> int:
    """Restore items below ``folder`` trashed together with it.

    Items trashed on their own, at another time, stay in trash.

    Returns:
        Number of items restored.
    """
    folder_ids = collect_descendant_folder_ids(folder)
    folders = Folder.objects.trashed().filter(
        pk__in=folder_ids,
        deleted_at=trashed_at,
    ).update(deleted_at=None, modified_at=restored_at)
    files = File.objects.trashed().filter(
        parent_id__in=[folder.pk, *folder_ids],
        deleted_at=trashed_at,
    ).update(deleted_at=None, modified_at=restored_at)
    return folders + files


def list_by_parent(
    parent_id: int | None,
    kind: ItemKind,
    *,
    include_trashed: bool = False,
) -> QuerySet[File] | QuerySet[Folder]:
    """Direct children of a folder (or of root when None)."""
    return _queryset(kind, include_trashed=include_trashed).children_of(
        parent_id,
    )


def list_starred(kind: ItemKind) -> QuerySet[File] | QuerySet[Folder]:
    """Live starred items of one kind, regardless of parent."""
    return _queryset(kind, include_trashed=False).starred()


def list_recent_files(limit: int) -> QuerySet[File]:
    """Live files, newest first, at most ``limit``."""
    return File.objects.live().order_by('-created_at', '-id')[:limit]


def list_trashed(kind: ItemKind) -> QuerySet[File] | QuerySet[Folder]:
    """Items of one kind in trash, most recently trashed first."""
    objects: CatalogQuerySet = kind.model.objects.all()  # type: ignore[assignment]
    return objects.trashed().order_by('-deleted_at', 'id')


def sum_live_file_sizes() -> int:
    """Total size of live files in bytes; 0 for an empty catalog."""
    return File.objects.live().aggregate(
        total=Sum('size_bytes'),
    )['total'] or 0
