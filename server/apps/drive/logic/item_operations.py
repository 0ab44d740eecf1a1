"""Business logic for folders and item metadata: create, rename, move, star."""

import logging

from django.db import transaction

from server.apps.drive.exceptions import InvalidItemError
from server.apps.drive.infrastructure.metadata import clean_item_name
from server.apps.drive.logic.catalog import (
    CatalogEntry,
    ItemKind,
    collect_descendant_folder_ids,
    find_item,
    find_parent_folder,
    insert_folder,
)
from server.apps.drive.models import Folder

logger = logging.getLogger(__name__)


def create_folder(name: str, parent_id: object = None) -> Folder:
    """Create a folder.

    Args:
        name: Folder name.
        parent_id: Containing folder id; None for root.

    Returns:
        Created Folder instance.

    Raises:
        InvalidItemError: If the name is blank or the parent id invalid.
        ItemNotFoundError: If the parent folder is missing or in trash.
    """
    display_name = clean_item_name(name)
    parent = find_parent_folder(parent_id)
    return insert_folder(name=display_name, parent=parent)


def rename_item(kind: ItemKind, item_id: object, name: str) -> CatalogEntry:
    """Rename a live file or folder.

    Items in trash cannot be renamed; restore them first.

    Args:
        kind: Item kind.
        item_id: Item identifier.
        name: New display name.

    Returns:
        Updated item.

    Raises:
        InvalidItemError: If the name is blank.
        ItemNotFoundError: If the item is missing or in trash.
    """
    display_name = clean_item_name(name)
    item = find_item(item_id, kind)
    old_name = item.name

    item.name = display_name
    item.save(update_fields=['name', 'modified_at'])

    logger.info(
        'Renamed %s %d: %s -> %s',
        kind,
        item.pk,
        old_name,
        display_name,
    )
    return item


def move_item(kind: ItemKind, item_id: object, parent_id: object) -> CatalogEntry:
    """Move a live item under another live folder, or to root.

    Args:
        kind: Item kind.
        item_id: Item identifier.
        parent_id: Destination folder id; None for root.

    Returns:
        Updated item.

    Raises:
        InvalidItemError: If a folder would be moved into its own subtree.
        ItemNotFoundError: If the item or destination is missing or trashed.
    """
    with transaction.atomic():
        item = find_item(item_id, kind)
        parent = find_parent_folder(parent_id)

        if isinstance(item, Folder) and parent is not None:
            if parent.pk == item.pk:
                raise InvalidItemError('A folder cannot contain itself')
            if parent.pk in collect_descendant_folder_ids(item):
                raise InvalidItemError(
                    'A folder cannot be moved into its own subfolder',
                )

        item.parent = parent
        item.save(update_fields=['parent', 'modified_at'])

    logger.info(
        'Moved %s %d to folder %s',
        kind,
        item.pk,
        parent.pk if parent else 'root',
    )
    return item


def toggle_star(kind: ItemKind, item_id: object) -> CatalogEntry:
    """Flip the star flag of a live item.

    Returns:
        Updated item.

    Raises:
        ItemNotFoundError: If the item is missing or in trash.
    """
    item = find_item(item_id, kind)
    item.is_starred = not item.is_starred
    item.save(update_fields=['is_starred', 'modified_at'])

    logger.info(
        'Star %s for %s %d',
        'set' if item.is_starred else 'cleared',
        kind,
        item.pk,
    )
    return item
