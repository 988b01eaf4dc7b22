"""
Submission store - persistence for accepted submissions.
"""

from typing import Any

from django.db import DatabaseError
from django.utils import timezone

from apps.connectors.models import Connector
from apps.core.logging import get_logger

from .exceptions import SubmissionStorageError
from .models import Submission

logger = get_logger(__name__)


class SubmissionStore:
    """Insert, finalize and list submissions."""

    async def insert(self, connector: Connector, form_data: dict[str, Any]) -> Submission:
        """
        Store a newly received submission with no outcomes.

        Raises:
            SubmissionStorageError: The row could not be written.
        """
        try:
            return await Submission.objects.acreate(
                connector=connector,
                owner_id=connector.owner_id,
                form_data=form_data,
                destinations_sent={},
                status=Submission.Status.RECEIVED,
            )
        except DatabaseError as e:
            logger.exception("submission_insert_failed", **{"connector.id": str(connector.id)})
            raise SubmissionStorageError() from e

    async def update_outcomes(self, submission: Submission, outcomes: dict[str, dict]) -> None:
        """Record dispatch outcomes and the resulting status."""
        submission.destinations_sent = outcomes
        submission.status = Submission.status_for(outcomes)
        submission.processed_at = timezone.now()
        await submission.asave(
            update_fields=["destinations_sent", "status", "processed_at", "updated_at"]
        )

    def list_by_connector(self, connector_id: str, limit: int = 50) -> list[Submission]:
        """Most recent submissions for a connector, newest first."""
        return list(
            Submission.objects.filter(connector_id=connector_id)
            .order_by("-created_at")
            .select_related("connector")[:limit]
        )
