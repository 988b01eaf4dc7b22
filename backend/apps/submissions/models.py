"""
Submission models.
"""

from django.db import models

from apps.core.models import PublicIdModel


class Submission(PublicIdModel):
    """
    One accepted form submission and its per-destination outcomes.

    Written twice: once on receipt (``status=received``, empty outcomes)
    and once after dispatch with the outcome mapping and final status.
    Nothing else writes to a submission in between.
    """

    class Status(models.TextChoices):
        RECEIVED = "received", "Received"
        DELIVERED = "delivered", "Delivered"
        PARTIAL = "partial", "Partially delivered"
        FAILED = "failed", "Failed"

    connector = models.ForeignKey(
        "connectors.Connector",
        on_delete=models.CASCADE,
        related_name="submissions",
    )
    # Copied from the connector so owner-scoped history needs no join
    owner_id = models.CharField(max_length=255, db_index=True)

    form_data = models.JSONField(default=dict)
    destinations_sent = models.JSONField(
        default=dict,
        blank=True,
        help_text="Outcome per destination type: success, error, timestamp",
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.RECEIVED,
    )
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["connector", "-created_at"], name="submission_connector_idx"),
        ]

    def __str__(self) -> str:
        return f"Submission {self.id} ({self.status})"

    @classmethod
    def status_for(cls, outcomes: dict[str, dict]) -> str:
        """Final status for an outcome mapping."""
        if not outcomes:
            return cls.Status.DELIVERED
        succeeded = sum(1 for outcome in outcomes.values() if outcome.get("success"))
        if succeeded == len(outcomes):
            return cls.Status.DELIVERED
        if succeeded == 0:
            return cls.Status.FAILED
        return cls.Status.PARTIAL
