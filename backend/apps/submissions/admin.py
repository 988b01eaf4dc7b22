"""
Admin configuration for submissions app.
"""

from django.contrib import admin

from apps.submissions.models import Submission


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    """Admin for submissions. Read-only: rows are written by ingestion."""

    list_display = ["id", "connector", "status", "field_count", "created_at", "processed_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["id", "connector__name", "owner_id"]
    raw_id_fields = ["connector"]
    readonly_fields = [
        "id",
        "connector",
        "owner_id",
        "form_data",
        "destinations_sent",
        "status",
        "created_at",
        "processed_at",
    ]

    def field_count(self, obj: Submission) -> int:
        return len(obj.form_data or {})

    field_count.short_description = "Fields"  # type: ignore[attr-defined]

    def has_add_permission(self, request) -> bool:
        return False
