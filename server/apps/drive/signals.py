"""Signal handlers for drive app."""

import logging
from functools import partial

from django.db import transaction
from django.db.models.signals import post_delete
from django.dispatch import receiver

from server.apps.drive.infrastructure.blobs import get_blob_store
from server.apps.drive.models import File

logger = logging.getLogger(__name__)


@receiver(post_delete, sender=File)
def discard_blob_after_delete(
    sender: type[File],
    instance: File,
    using: str,
    **kwargs: object,
) -> None:
    """Delete the blob once a File row deletion is committed.

    Trash never deletes rows, so this only fires for hard deletes made
    outside the trash flow (ORM, shell, future purge). Without it those
    deletes would leave orphaned blobs. The discard waits for commit:
    a rolled back delete keeps both the row and its blob.

    Args:
        sender: The File model class.
        instance: The File instance being deleted.
        using: Database alias the delete ran on.
        **kwargs: Additional signal arguments.
    """
    if not instance.storage_key:
        return

    logger.info(
        'Blob scheduled for discard after catalog delete: %s (ID: %s)',
        instance.storage_key,
        instance.pk,
    )
    # Best effort: failures are logged by the blob store
    transaction.on_commit(
        partial(get_blob_store().discard, instance.storage_key),
        using=using,
    )
