"""Drive settings: quota policy, views and blob key layout."""

from typing import Final

from server.settings.components import config

_GIB: Final = 1024 * 1024 * 1024

# Storage limit reported by the quota endpoint: 15 GB by default
DRIVE_QUOTA_BYTES = config('DRIVE_QUOTA_BYTES', cast=int, default=15 * _GIB)

# Quota is advisory unless enforcement is switched on
DRIVE_ENFORCE_QUOTA = config('DRIVE_ENFORCE_QUOTA', cast=bool, default=False)

# Maximum number of files in the "recent" view
DRIVE_RECENT_LIMIT = config('DRIVE_RECENT_LIMIT', cast=int, default=50)

# Key namespace for blobs inside the configured storage
DRIVE_BLOB_PREFIX = config('DRIVE_BLOB_PREFIX', default='blobs')
