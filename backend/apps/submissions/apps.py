"""
Submissions app configuration.
"""

from django.apps import AppConfig


class SubmissionsConfig(AppConfig):
    """Configuration for submissions app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.submissions"
    verbose_name = "Submissions"
