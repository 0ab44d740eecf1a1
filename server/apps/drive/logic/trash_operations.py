"""Business logic for trash (soft delete) operations.

Trash only flags catalog rows; blobs are never touched, so restore is
always lossless. Trashing a folder cascades to everything below it.
"""

import logging

from django.db import transaction
from django.utils import timezone

from server.apps.drive.logic.catalog import (
    CatalogEntry,
    ItemKind,
    collect_trashed_ancestors,
    find_item,
    restore_descendants,
    set_trashed,
    trash_descendants,
)
from server.apps.drive.models import Folder

logger = logging.getLogger(__name__)


def trash_item(kind: ItemKind, item_id: object) -> CatalogEntry:
    """Move item to trash (soft delete).

    Sets ``deleted_at``. For a folder, every live descendant gets the
    same timestamp so a later restore can bring back exactly this
    batch. Trashing an item already in trash changes nothing.

    Args:
        kind: Item kind.
        item_id: Item identifier.

    Returns:
        Updated item.

    Raises:
        ItemNotFoundError: If the item doesn't exist.
    """
    item = find_item(item_id, kind, include_trashed=True)
    if item.is_trashed:
        logger.info('%s %d is already in trash', kind, item.pk)
        return item

    trashed_at = timezone.now()
    cascaded = 0
    with transaction.atomic():
        set_trashed(item, trashed_at)
        if isinstance(item, Folder):
            cascaded = trash_descendants(item, trashed_at)

    logger.info(
        'Moved to trash: %s %d (%d descendants)',
        kind,
        item.pk,
        cascaded,
    )
    return item


def restore_item(kind: ItemKind, item_id: object) -> CatalogEntry:
    """Restore item from trash.

    Descendants trashed together with a folder come back with it. If
    folders above the item are still in trash they are restored too,
    so the item keeps its parent and stays reachable. Restoring a live
    item changes nothing.

    Args:
        kind: Item kind.
        item_id: Item identifier.

    Returns:
        Updated item.

    Raises:
        ItemNotFoundError: If the item doesn't exist.
    """
    item = find_item(item_id, kind, include_trashed=True)
    if not item.is_trashed:
        logger.info('%s %d is not in trash', kind, item.pk)
        return item

    trashed_at = item.deleted_at
    restored_at = timezone.now()
    cascaded = 0
    with transaction.atomic():
        for ancestor in collect_trashed_ancestors(item):
            logger.info(
                'Restoring folder %d so %s %d stays reachable',
                ancestor.pk,
                kind,
                item.pk,
            )
            set_trashed(ancestor, None)

        set_trashed(item, None)
        if isinstance(item, Folder):
            cascaded = restore_descendants(item, trashed_at, restored_at)  # type: ignore[arg-type]

    logger.info(
        'Restored from trash: %s %d (%d descendants)',
        kind,
        item.pk,
        cascaded,
    )
    return item


def toggle_trash(
    kind: ItemKind,
    item_id: object,
    *,
    restore: bool = False,
) -> CatalogEntry:
    """Trash an item, or restore it when ``restore`` is set."""
    if restore:
        return restore_item(kind, item_id)
    return trash_item(kind, item_id)
