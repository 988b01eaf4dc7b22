"""
Connector models.
"""

from django.conf import settings
from django.db import models

from apps.core.models import PublicIdModel
from apps.destinations.schemas import flatten_destinations


class Connector(PublicIdModel):
    """
    A named binding from one public ingestion URL to a list of destinations.

    ``destinations`` holds destination configurations as stored JSON:
    ``[{"type": "email", "enabled": true, "config": {...}}, ...]``. Rows
    written by older clients may wrap that list in a second list.
    """

    # External auth subject of the owner (multi-tenant scoping)
    owner_id = models.CharField(max_length=255, db_index=True)

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    destinations = models.JSONField(
        default=list,
        blank=True,
        help_text="Destination configurations: type, enabled flag and type-specific config",
    )
    active = models.BooleanField(
        default=True,
        help_text="Inactive connectors reject submissions",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner_id", "-created_at"], name="connector_owner_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"

    @property
    def ingestion_url(self) -> str:
        """Public URL forms submit to."""
        return f"{settings.PUBLIC_BASE_URL}/api/submit/{self.id}"

    @property
    def destination_list(self) -> list:
        """Destinations as a flat list, whatever shape was stored."""
        return flatten_destinations(self.destinations)

    @property
    def enabled_destination_types(self) -> list[str]:
        return [
            entry["type"]
            for entry in self.destination_list
            if isinstance(entry, dict) and entry.get("enabled") is True and entry.get("type")
        ]
