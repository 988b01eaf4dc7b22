"""
Admin configuration for connectors app.
"""

from django.contrib import admin

from apps.connectors.models import Connector


@admin.register(Connector)
class ConnectorAdmin(admin.ModelAdmin):
    """Admin for connectors."""

    list_display = [
        "name",
        "id",
        "owner_id",
        "active",
        "destination_types",
        "created_at",
    ]
    list_filter = ["active", "created_at"]
    search_fields = ["name", "owner_id", "id"]
    readonly_fields = ["id", "ingestion_url", "created_at", "updated_at"]

    def destination_types(self, obj: Connector) -> str:
        """Enabled destination types."""
        return ", ".join(obj.enabled_destination_types) or "-"

    destination_types.short_description = "Destinations"  # type: ignore[attr-defined]
