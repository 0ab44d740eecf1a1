"""Django app configuration for drive app."""

from typing import override

from django.apps import AppConfig


class DriveAppConfig(AppConfig):
    """Configuration for drive app.

    Builds the immutable ``DriveConfig`` once at startup; lifecycle
    operations receive it by reference.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.drive'
    label = 'drive'
    verbose_name = 'Drive'

    @override
    def ready(self) -> None:
        """Build drive configuration and import signal handlers."""
        from server.apps.drive import signals  # noqa: F401
        from server.apps.drive.config import DriveConfig

        self.drive_config = DriveConfig.from_settings()
