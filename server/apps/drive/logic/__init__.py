"""Business logic layer for drive app.

This package contains all business logic:
- Metadata catalog queries and inserts (catalog)
- View engine for browse requests (views)
- Upload, download, folder, rename, star, trash and quota operations

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).
"""
