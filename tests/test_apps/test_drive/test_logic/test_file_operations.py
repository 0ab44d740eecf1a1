"""Tests for upload and download business logic."""

import asyncio
from io import BytesIO

import pytest
from django.db import DatabaseError

from server.apps.drive.config import DriveConfig
from server.apps.drive.exceptions import (
    BlobNotFoundError,
    BlobWriteError,
    InvalidItemError,
    ItemNotFoundError,
    QuotaExceededError,
)
from server.apps.drive.logic import file_operations
from server.apps.drive.logic.catalog import ItemKind
from server.apps.drive.logic.file_operations import open_download, upload_file
from server.apps.drive.logic.item_operations import create_folder
from server.apps.drive.logic.trash_operations import trash_item
from server.apps.drive.models import File


class _FailingStream(BytesIO):
    def read(self, size=-1):
        raise ConnectionResetError('client disconnected')


@pytest.mark.django_db
class TestUploadFile:
    """Tests for upload_file."""

    def test_upload_creates_record(self, upload, blob_store):
        """Test successful upload (blob + catalog)."""
        file_instance = upload(b'hello', 'hello.txt')

        assert file_instance.id is not None
        assert file_instance.name == 'hello.txt'
        assert file_instance.size_bytes == 5
        assert file_instance.mime_type == 'text/plain'
        assert file_instance.parent is None
        assert file_instance.is_starred is False
        assert blob_store.exists(file_instance.storage_key)

    def test_upload_size_matches_bytes_and_download_round_trips(self, upload):
        """Test size equals input length and download returns the bytes."""
        content = bytes(range(256)) * 1000

        file_instance = upload(content, 'data.bin')

        assert file_instance.size_bytes == len(content)
        with open_download(file_instance.id) as download:
            assert download.stream.read() == content

    def test_upload_into_folder(self, upload):
        """Test upload with a parent folder."""
        folder = create_folder('Docs')

        file_instance = upload(b'abc', 'a.txt', folder.id)

        assert file_instance.parent == folder

    def test_same_name_uploads_keep_their_own_bytes(self, upload):
        """Test uploads sharing a name don't overwrite each other."""
        first = upload(b'first', 'report.txt')
        second = upload(b'second', 'report.txt')

        assert first.storage_key != second.storage_key
        with open_download(first.id) as download:
            assert download.stream.read() == b'first'
        with open_download(second.id) as download:
            assert download.stream.read() == b'second'

    def test_upload_blank_name(self, upload, blob_store):
        """Test blank name is rejected before any bytes are written."""
        with pytest.raises(InvalidItemError):
            upload(b'abc', '   ')

        assert File.objects.count() == 0
        assert list(blob_store.keys()) == []

    def test_upload_missing_parent(self, upload, blob_store):
        """Test unknown parent is rejected before any bytes are written."""
        with pytest.raises(ItemNotFoundError):
            upload(b'abc', 'a.txt', 999)

        assert File.objects.count() == 0
        assert list(blob_store.keys()) == []

    def test_upload_into_trashed_folder(self, upload):
        """Test trashed folders cannot receive uploads."""
        folder = create_folder('Old')
        trash_item(ItemKind.FOLDER, folder.id)

        with pytest.raises(ItemNotFoundError):
            upload(b'abc', 'a.txt', folder.id)

    def test_upload_invalid_parent_id(self, upload):
        """Test unparsable parent id is a validation failure."""
        with pytest.raises(InvalidItemError):
            upload(b'abc', 'a.txt', 'abc')

    def test_upload_interrupted_stream(self, blob_store, drive_config):
        """Test client disconnect creates neither record nor blob."""
        with pytest.raises(BlobWriteError):
            upload_file(
                _FailingStream(b'data'),
                'a.txt',
                blob_store=blob_store,
                config=drive_config,
            )

        assert File.objects.count() == 0
        assert list(blob_store.keys()) == []

    def test_catalog_failure_discards_blob(
        self,
        upload,
        blob_store,
        monkeypatch,
    ):
        """Test blob is discarded when the catalog insert fails."""
        def failing_insert(**kwargs):
            raise InvalidItemError('storage_key: broken')

        monkeypatch.setattr(file_operations, 'insert_file', failing_insert)

        with pytest.raises(InvalidItemError):
            upload(b'abc', 'a.txt')

        assert File.objects.count() == 0
        assert list(blob_store.keys()) == []

    def test_quota_lookup_failure_discards_blob(self, blob_store, monkeypatch):
        """Test blob is discarded when the quota check itself fails."""
        def failing_check(size, *, config):
            raise DatabaseError('database is locked')

        monkeypatch.setattr(file_operations, 'check_quota', failing_check)

        with pytest.raises(DatabaseError):
            upload_file(
                BytesIO(b'abc'),
                'a.txt',
                blob_store=blob_store,
                config=DriveConfig(quota_bytes=10, enforce_quota=True),
            )

        assert File.objects.count() == 0
        assert list(blob_store.keys()) == []

    def test_cancelled_upload_discards_blob(
        self,
        upload,
        blob_store,
        monkeypatch,
    ):
        """Test blob is discarded when the caller is cancelled mid-insert."""
        def cancelled_insert(**kwargs):
            raise asyncio.CancelledError

        monkeypatch.setattr(file_operations, 'insert_file', cancelled_insert)

        with pytest.raises(asyncio.CancelledError):
            upload(b'abc', 'a.txt')

        assert File.objects.count() == 0
        assert list(blob_store.keys()) == []

    def test_advisory_quota_never_blocks(self, blob_store):
        """Test uploads beyond the limit succeed when not enforced."""
        config = DriveConfig(quota_bytes=3)

        file_instance = upload_file(
            BytesIO(b'too large'),
            'a.txt',
            blob_store=blob_store,
            config=config,
        )

        assert file_instance.size_bytes == 9

    def test_enforced_quota_rejects_upload(self, blob_store):
        """Test enforced quota rejects and discards the blob."""
        config = DriveConfig(quota_bytes=10, enforce_quota=True)
        kept = upload_file(
            BytesIO(b'12345678'),
            'a.txt',
            blob_store=blob_store,
            config=config,
        )

        with pytest.raises(QuotaExceededError) as exc_info:
            upload_file(
                BytesIO(b'12345'),
                'b.txt',
                blob_store=blob_store,
                config=config,
            )

        assert exc_info.value.required_bytes == 5
        assert exc_info.value.used_bytes == 8
        assert list(File.objects.all()) == [kept]
        assert list(blob_store.keys()) == [kept.storage_key]

    def test_enforced_quota_at_exact_limit(self, blob_store):
        """Test an upload filling the quota exactly is accepted."""
        config = DriveConfig(quota_bytes=5, enforce_quota=True)

        file_instance = upload_file(
            BytesIO(b'12345'),
            'a.txt',
            blob_store=blob_store,
            config=config,
        )

        assert file_instance.size_bytes == 5


@pytest.mark.django_db
class TestOpenDownload:
    """Tests for open_download."""

    def test_inline_download(self, upload):
        """Test inline disposition for previews."""
        file_instance = upload(b'<svg/>', 'logo.svg')

        with open_download(file_instance.id) as download:
            assert download.disposition.startswith('inline')
            assert download.filename == 'logo.svg'
            assert download.size == 6
            assert download.mime_type == 'image/svg+xml'

    def test_attachment_download(self, upload):
        """Test attachment disposition suggests the filename."""
        file_instance = upload(b'abc', 'report.txt')

        with open_download(file_instance.id, as_attachment=True) as download:
            assert download.disposition == 'attachment; filename="report.txt"'

    def test_download_closes_stream(self, upload):
        """Test leaving the context closes the blob stream."""
        file_instance = upload(b'abc', 'a.txt')

        with open_download(file_instance.id) as download:
            stream = download.stream

        assert stream.closed

    def test_download_missing_file(self, db):
        """Test unknown id raises ItemNotFoundError."""
        with pytest.raises(ItemNotFoundError):
            open_download(404)

    def test_download_trashed_file(self, upload):
        """Test trashed files cannot be downloaded."""
        file_instance = upload(b'abc', 'a.txt')
        trash_item(ItemKind.FILE, file_instance.id)

        with pytest.raises(ItemNotFoundError):
            open_download(file_instance.id)

    def test_download_missing_blob(self, upload, blob_store):
        """Test dangling metadata surfaces as BlobNotFoundError."""
        file_instance = upload(b'abc', 'a.txt')
        blob_store.storage.delete(file_instance.storage_key)

        with pytest.raises(BlobNotFoundError) as exc_info:
            open_download(file_instance.id)

        assert exc_info.value.to_payload() == {
            'kind': 'not_found',
            'message': 'File content not found',
        }
