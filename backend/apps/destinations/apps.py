"""
Destinations app configuration.
"""

from django.apps import AppConfig


class DestinationsConfig(AppConfig):
    """Configuration for destinations app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.destinations"
    verbose_name = "Destinations"

    def ready(self) -> None:
        from . import checks  # noqa: F401
