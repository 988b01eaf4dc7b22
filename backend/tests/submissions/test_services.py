"""
Tests for SubmissionStore and submission status.
"""

from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync

from apps.submissions.models import Submission
from apps.submissions.services import SubmissionStore
from tests.connectors.factories import ConnectorFactory

from .factories import SubmissionFactory


class TestStatusFor:
    @pytest.mark.parametrize(
        ("outcomes", "expected"),
        [
            ({}, Submission.Status.DELIVERED),
            ({"email": {"success": True}}, Submission.Status.DELIVERED),
            ({"email": {"success": False, "error": "x"}}, Submission.Status.FAILED),
            (
                {"email": {"success": True}, "slack": {"success": False, "error": "x"}},
                Submission.Status.PARTIAL,
            ),
        ],
    )
    def test_status(self, outcomes: dict, expected: str) -> None:
        assert Submission.status_for(outcomes) == expected


@pytest.mark.django_db
class TestSubmissionStore:
    """Tests for submission persistence."""

    def test_insert_records_received_submission(self) -> None:
        connector = ConnectorFactory.create(owner_id="user_a")

        submission = async_to_sync(SubmissionStore().insert)(connector, {"name": "Ada"})

        stored = Submission.objects.get(id=submission.id)
        assert stored.connector_id == connector.id
        assert stored.owner_id == "user_a"
        assert stored.form_data == {"name": "Ada"}
        assert stored.destinations_sent == {}
        assert stored.status == Submission.Status.RECEIVED
        assert stored.processed_at is None

    def test_update_outcomes(self) -> None:
        submission = SubmissionFactory.create()
        outcomes = {
            "email": {"success": True},
            "slack": {"success": False, "error": "boom", "timestamp": "2026-01-01T00:00:00Z"},
        }

        async_to_sync(SubmissionStore().update_outcomes)(submission, outcomes)

        submission.refresh_from_db()
        assert submission.destinations_sent == outcomes
        assert submission.status == Submission.Status.PARTIAL
        assert submission.processed_at is not None

    def test_list_by_connector_newest_first(self) -> None:
        connector = ConnectorFactory.create()
        older = SubmissionFactory.create(connector=connector)
        newer = SubmissionFactory.create(connector=connector)
        SubmissionFactory.create()
        Submission.objects.filter(id=older.id).update(
            created_at=newer.created_at - timedelta(minutes=5)
        )

        submissions = SubmissionStore().list_by_connector(str(connector.id))

        assert [s.id for s in submissions] == [newer.id, older.id]

    def test_list_by_connector_limit(self) -> None:
        connector = ConnectorFactory.create()
        SubmissionFactory.create_batch(3, connector=connector)

        assert len(SubmissionStore().list_by_connector(str(connector.id), limit=2)) == 2
