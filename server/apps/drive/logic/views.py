"""Hierarchy and view engine: what a client sees for a browse request."""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Self, final

from server.apps.drive.config import DriveConfig, get_drive_config
from server.apps.drive.logic.catalog import (
    ItemKind,
    list_by_parent,
    list_recent_files,
    list_starred,
    list_trashed,
    parse_parent_id,
)
from server.apps.drive.models import File, Folder

logger = logging.getLogger(__name__)


class View(enum.StrEnum):
    """Browse view selector."""

    DEFAULT = 'default'
    RECENT = 'recent'
    STARRED = 'starred'
    TRASH = 'trash'

    @classmethod
    def parse(cls, raw: str | None) -> Self:
        """Parse a view token; unknown or missing tokens mean default."""
        try:
            return cls((raw or '').strip().lower())
        except ValueError:
            return cls.DEFAULT


@final
@dataclass(frozen=True, slots=True)
class BrowseResult:
    """Files and folders matched by a view, evaluated eagerly."""

    files: list[File] = field(default_factory=list)
    folders: list[Folder] = field(default_factory=list)

    def to_payload(self) -> dict[str, list[dict[str, Any]]]:
        """Client-visible listing."""
        return {
            'files': [file_instance.to_payload() for file_instance in self.files],
            'folders': [folder.to_payload() for folder in self.folders],
        }


def browse(
    view: View | str | None = None,
    parent_id: object = None,
    *,
    config: DriveConfig | None = None,
) -> BrowseResult:
    """Resolve a view request against the catalog.

    - default: live direct children of ``parent_id`` (root when absent)
    - recent: newest live files, up to ``config.recent_limit``; no folders
    - starred: every live starred item, regardless of parent
    - trash: every item in trash, both kinds

    Args:
        view: View selector; unknown tokens fall back to default.
        parent_id: Folder id for the default view.
        config: Drive configuration; the app's when omitted.

    Returns:
        BrowseResult with files and folders.

    Raises:
        InvalidItemError: If the default view gets an unparsable parent.
    """
    selected = view if isinstance(view, View) else View.parse(view)
    config = config or get_drive_config()

    if selected is View.RECENT:
        result = BrowseResult(
            files=list(list_recent_files(config.recent_limit)),
        )
    elif selected is View.STARRED:
        result = BrowseResult(
            files=list(list_starred(ItemKind.FILE)),
            folders=list(list_starred(ItemKind.FOLDER)),
        )
    elif selected is View.TRASH:
        result = BrowseResult(
            files=list(list_trashed(ItemKind.FILE)),
            folders=list(list_trashed(ItemKind.FOLDER)),
        )
    else:
        parent = parse_parent_id(parent_id)
        result = BrowseResult(
            files=list(list_by_parent(parent, ItemKind.FILE)),
            folders=list(list_by_parent(parent, ItemKind.FOLDER)),
        )

    logger.debug(
        'Browse %s (parent: %s): %d files, %d folders',
        selected,
        parent_id,
        len(result.files),
        len(result.folders),
    )
    return result
