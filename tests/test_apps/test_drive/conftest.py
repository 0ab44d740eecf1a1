"""Shared fixtures for drive app tests."""

from collections.abc import Callable
from io import BytesIO

import boto3
import pytest
from moto import mock_aws

from server.apps.drive.config import DriveConfig
from server.apps.drive.infrastructure.blobs import (
    StorageBlobStore,
    get_blob_store,
)
from server.apps.drive.logic.file_operations import upload_file
from server.apps.drive.models import File

_GIB = 1024 * 1024 * 1024


@pytest.fixture(autouse=True)
def blob_root(settings, tmp_path):
    """Point the default storage at a temporary directory.

    Returns:
        Path of the blob storage root.
    """
    root = tmp_path / 'storage'
    settings.STORAGES = {
        **settings.STORAGES,
        'default': {
            'BACKEND': 'django.core.files.storage.FileSystemStorage',
            'OPTIONS': {'location': str(root)},
        },
    }
    return root


@pytest.fixture
def blob_store(blob_root) -> StorageBlobStore:
    """Blob store over the temporary default storage.

    Returns:
        StorageBlobStore instance.
    """
    return get_blob_store()


@pytest.fixture
def drive_config() -> DriveConfig:
    """Default drive configuration (advisory 15 GB quota).

    Returns:
        DriveConfig instance.
    """
    return DriveConfig(quota_bytes=15 * _GIB)


@pytest.fixture
def upload(db, blob_store, drive_config) -> Callable[..., File]:
    """Upload helper bound to the test blob store and config.

    Returns:
        Callable taking content bytes, name and optional parent id.
    """
    def _upload(
        content: bytes = b'hello',
        name: str = 'hello.txt',
        parent_id: object = None,
    ) -> File:
        return upload_file(
            BytesIO(content),
            name,
            parent_id,
            blob_store=blob_store,
            config=drive_config,
        )

    return _upload


@pytest.fixture
def mock_s3():
    """Mock S3 service with drive-blobs bucket.

    Yields:
        boto3 S3 resource with drive-blobs bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket='drive-blobs')

        yield conn
