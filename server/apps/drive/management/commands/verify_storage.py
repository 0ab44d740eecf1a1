"""Management command to check catalog and blob store consistency."""

import logging
from typing import Any

from django.core.management.base import BaseCommand, CommandError, CommandParser

from server.apps.drive.infrastructure.blobs import get_blob_store
from server.apps.drive.models import File

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Report file records without blobs, and optionally orphan blobs."""

    help = 'Verify that every file record has its blob (and vice versa)'

    def add_arguments(self, parser: CommandParser) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--orphans',
            action='store_true',
            help='Also list stored blobs no file record references',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the verification.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If any file record references a missing blob.
        """
        store = get_blob_store()
        # Trashed files keep their blobs, so they are checked too
        files = File.objects.with_trashed().order_by('pk')

        checked = 0
        dangling = 0
        for file_instance in files.iterator():
            checked += 1
            if store.exists(file_instance.storage_key):
                continue
            dangling += 1
            self.stderr.write(
                f'Missing blob for file {file_instance.pk} '
                f'({file_instance.name}): {file_instance.storage_key}',
            )
            logger.error(
                'Dangling metadata: file %d references missing blob %s',
                file_instance.pk,
                file_instance.storage_key,
            )

        orphans = 0
        if options['orphans']:
            referenced = set(
                File.objects.with_trashed().values_list(
                    'storage_key',
                    flat=True,
                ),
            )
            for key in store.keys():
                if key not in referenced:
                    orphans += 1
                    self.stdout.write(f'Orphan blob: {key}')

        summary = f'Checked {checked} files, {dangling} missing blobs'
        if options['orphans']:
            summary = f'{summary}, {orphans} orphan blobs'

        if dangling:
            raise CommandError(summary)
        self.stdout.write(self.style.SUCCESS(summary))
