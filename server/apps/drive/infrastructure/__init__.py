"""Infrastructure layer for drive app.

This package contains integrations with external systems:
- Blob store contract over Django storage backends (local disk, S3)
- Metadata helpers (MIME type, blob keys, names)

Keep infrastructure concerns separate from business logic.
"""
