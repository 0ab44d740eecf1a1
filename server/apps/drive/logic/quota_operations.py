"""Business logic for storage quota operations."""

import logging
from dataclasses import dataclass
from typing import final

from server.apps.drive.config import DriveConfig, get_drive_config
from server.apps.drive.exceptions import QuotaExceededError
from server.apps.drive.logic.catalog import sum_live_file_sizes

logger = logging.getLogger(__name__)


@final
@dataclass(frozen=True, slots=True)
class QuotaUsage:
    """Storage usage against the configured limit.

    Usage counts live files only: trashed files do not count.
    """

    used: int
    limit: int

    def has_space_for(self, size_bytes: int) -> bool:
        """Check if there's enough space for the given size.

        Args:
            size_bytes: Size to check in bytes.

        Returns:
            True if there's enough space, False otherwise.
        """
        return self.used + size_bytes <= self.limit

    def available_bytes(self) -> int:
        """Get available storage space.

        Returns:
            Available bytes (never negative).
        """
        return max(0, self.limit - self.used)

    def to_payload(self) -> dict[str, int]:
        """Client-visible usage."""
        return {'used': self.used, 'limit': self.limit}


def get_quota(*, config: DriveConfig | None = None) -> QuotaUsage:
    """Compute current usage from the catalog.

    Args:
        config: Drive configuration; the app's when omitted.

    Returns:
        QuotaUsage with used and limit bytes.
    """
    config = config or get_drive_config()
    return QuotaUsage(used=sum_live_file_sizes(), limit=config.quota_bytes)


def check_quota(size_bytes: int, *, config: DriveConfig | None = None) -> None:
    """Check that ``size_bytes`` more would fit in the quota.

    Args:
        size_bytes: Size of the upload in bytes.
        config: Drive configuration; the app's when omitted.

    Raises:
        QuotaExceededError: If upload would exceed quota.
    """
    usage = get_quota(config=config)

    if not usage.has_space_for(size_bytes):
        logger.warning(
            'Quota exceeded: need %d, have %d available',
            size_bytes,
            usage.available_bytes(),
        )
        raise QuotaExceededError(
            quota_bytes=usage.limit,
            used_bytes=usage.used,
            required_bytes=size_bytes,
        )
