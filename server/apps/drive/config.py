"""Explicit drive configuration object."""

from dataclasses import dataclass
from typing import Self, final

from django.apps import apps
from django.conf import settings


@final
@dataclass(frozen=True, slots=True)
class DriveConfig:
    """Drive policy values, read from settings once at startup.

    Attributes:
        quota_bytes: Storage limit reported (and optionally enforced).
        enforce_quota: Reject uploads that would exceed ``quota_bytes``.
        recent_limit: Maximum number of files in the recent view.
        blob_prefix: Key namespace for blobs inside the storage.
    """

    quota_bytes: int
    enforce_quota: bool = False
    recent_limit: int = 50
    blob_prefix: str = 'blobs'

    @classmethod
    def from_settings(cls) -> Self:
        """Build configuration from Django settings.

        Returns:
            New DriveConfig instance.
        """
        return cls(
            quota_bytes=settings.DRIVE_QUOTA_BYTES,
            enforce_quota=settings.DRIVE_ENFORCE_QUOTA,
            recent_limit=settings.DRIVE_RECENT_LIMIT,
            blob_prefix=settings.DRIVE_BLOB_PREFIX,
        )


def get_drive_config() -> DriveConfig:
    """Get the configuration built when the drive app became ready."""
    return apps.get_app_config('drive').drive_config  # type: ignore[attr-defined]
