"""Database models for drive app: the metadata catalog."""

from typing import Any, Final, Self, final, override

from django.db import models

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_STORAGE_KEY_MAX_LENGTH: Final = 512
_MIME_TYPE_MAX_LENGTH: Final = 255


class CatalogQuerySet(models.QuerySet):
    """QuerySet with explicit trash policies.

    Managers apply no implicit filter: every query path picks one of
    ``live()``, ``trashed()`` or ``with_trashed()``.
    """

    def live(self) -> Self:
        """Items whose deletion timestamp is null."""
        return self.filter(deleted_at__isnull=True)

    def trashed(self) -> Self:
        """Items whose deletion timestamp is set."""
        return self.filter(deleted_at__isnull=False)

    def with_trashed(self) -> Self:
        """Live and trashed items alike."""
        return self.all()

    def starred(self) -> Self:
        """Items with the star flag set."""
        return self.filter(is_starred=True)

    def children_of(self, parent_id: int | None) -> Self:
        """Direct children of a folder, or root-level items for None."""
        if parent_id is None:
            return self.filter(parent__isnull=True)
        return self.filter(parent_id=parent_id)


class CatalogItem(models.Model):
    """Fields shared by files and folders.

    ``deleted_at`` is the soft-delete marker: null means live, a
    timestamp means the item sits in trash. Trash never removes rows.
    """

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    is_starred = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        default=None,
        db_index=True,
        help_text='Set when the item is moved to trash',
    )

    objects = CatalogQuerySet.as_manager()

    kind: str = ''

    class Meta:
        """Model metadata."""

        abstract = True

    @property
    def is_trashed(self) -> bool:
        """Whether the item is in trash."""
        return self.deleted_at is not None

    def to_payload(self) -> dict[str, Any]:
        """Client-visible record.

        Returns:
            Dictionary of public fields, timestamps in ISO 8601.
        """
        return {
            'id': self.pk,
            'kind': self.kind,
            'name': self.name,
            'is_starred': self.is_starred,
            'parent_id': self.parent_id,  # type: ignore[attr-defined]
            'created_at': self.created_at.isoformat(),
            'updated_at': self.modified_at.isoformat(),
            'deleted_at': (
                self.deleted_at.isoformat() if self.deleted_at else None
            ),
        }


@final
class Folder(CatalogItem):
    """Folder in the hierarchy.

    Parent references are lookups, not ownership; ``PROTECT`` keeps a
    folder row from disappearing while anything still points at it.
    """

    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='subfolders',
        help_text='Containing folder; null for root',
    )

    kind = 'folder'

    class Meta:
        """Model metadata."""

        verbose_name = 'Folder'  # type: ignore[mutable-override]
        verbose_name_plural = 'Folders'  # type: ignore[mutable-override]
        ordering = ['name', 'id']

        indexes = [
            # Optimize hierarchical browse queries
            models.Index(
                fields=['parent', 'deleted_at'],
                name='drive_folder_parent_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'folder:{self.name}'


@final
class File(CatalogItem):
    """File whose bytes live in the blob store.

    ``storage_key`` is the opaque handle returned by the blob store. It
    is set once at upload and never exposed to clients.
    """

    parent = models.ForeignKey(
        Folder,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='files',
        help_text='Containing folder; null for root',
    )

    storage_key = models.CharField(
        max_length=_STORAGE_KEY_MAX_LENGTH,
        unique=True,
        editable=False,
        help_text='Opaque blob store key',
    )

    # Authoritative: bytes actually written to the blob store
    size_bytes = models.BigIntegerField(
        help_text='File size in bytes',
    )

    mime_type = models.CharField(
        max_length=_MIME_TYPE_MAX_LENGTH,
        default='application/octet-stream',
        help_text='MIME type guessed from the file name',
    )

    kind = 'file'

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering = ['name', 'id']

        indexes = [
            # Optimize hierarchical browse queries
            models.Index(
                fields=['parent', 'deleted_at'],
                name='drive_file_parent_idx',
            ),
            # Optimize recent files queries
            models.Index(
                fields=['-created_at'],
                name='drive_file_recent_idx',
            ),
        ]

        constraints = [
            models.CheckConstraint(
                condition=models.Q(size_bytes__gte=0),
                name='drive_file_size_non_negative',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'file:{self.name}'

    @override
    def to_payload(self) -> dict[str, Any]:
        """Client-visible record, without the storage key."""
        payload = super().to_payload()
        payload['size'] = self.size_bytes
        payload['mime_type'] = self.mime_type
        return payload
