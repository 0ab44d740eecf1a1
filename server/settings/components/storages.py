"""Django storage configuration for the blob store.

The backend is chosen once here, at startup:

- ``local`` (default): ``FileSystemStorage`` under ``DRIVE_BLOB_ROOT``
- ``s3``: django-storages ``S3Storage`` (MinIO, R2, AWS)

Code that reads or writes blobs goes through ``default_storage`` and
never branches on which backend is configured.
"""

from typing import Any, Final

from server.settings.components import BASE_DIR, config

_BACKEND: Final = config('DRIVE_STORAGE_BACKEND', default='local')

if _BACKEND == 's3':
    _DEFAULT_STORAGE: dict[str, Any] = {
        'BACKEND': 'server.apps.drive.infrastructure.storage.DriveS3Storage',
        'OPTIONS': {
            'bucket_name': config('AWS_STORAGE_BUCKET_NAME'),
            'access_key': config('AWS_ACCESS_KEY_ID'),
            'secret_key': config('AWS_SECRET_ACCESS_KEY'),
            'endpoint_url': config(
                'AWS_S3_ENDPOINT_URL',
                default=None,
            ),
            'region_name': config(
                'AWS_S3_REGION_NAME',
                default='auto',
            ),
            'file_overwrite': False,  # Blob keys are never reused
            'default_acl': None,  # Inherit bucket ACL
        },
    }
else:
    _DEFAULT_STORAGE = {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
        'OPTIONS': {
            'location': config(
                'DRIVE_BLOB_ROOT',
                default=str(BASE_DIR.joinpath('uploads')),
            ),
        },
    }

STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': _DEFAULT_STORAGE,
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
