"""
Connectors app configuration.
"""

from django.apps import AppConfig


class ConnectorsConfig(AppConfig):
    """Configuration for connectors app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.connectors"
    verbose_name = "Connectors"
