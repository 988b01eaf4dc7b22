"""
Tests for ConnectorService.
"""

from datetime import timedelta

import pytest

from apps.connectors.models import Connector
from apps.connectors.schemas import ConnectorCreate, ConnectorUpdate
from apps.connectors.services import ConnectorService
from apps.submissions.models import Submission
from tests.submissions.factories import SubmissionFactory

from .factories import ConnectorFactory, email_destination, slack_destination


@pytest.mark.django_db
class TestConnectorService:
    """Tests for owner-scoped connector management."""

    def test_list_connectors_scoped_to_owner(self) -> None:
        mine = ConnectorFactory.create(owner_id="user_a")
        ConnectorFactory.create(owner_id="user_b")

        connectors = ConnectorService("user_a").list_connectors()

        assert [c.id for c in connectors] == [mine.id]

    def test_list_connectors_newest_first(self) -> None:
        first = ConnectorFactory.create(owner_id="user_a")
        second = ConnectorFactory.create(owner_id="user_a")
        Connector.objects.filter(id=first.id).update(
            created_at=second.created_at - timedelta(hours=1)
        )

        connectors = ConnectorService("user_a").list_connectors()

        assert [c.id for c in connectors] == [second.id, first.id]

    def test_get_connector_other_owner_returns_none(self) -> None:
        connector = ConnectorFactory.create(owner_id="user_b")

        assert ConnectorService("user_a").get_connector(str(connector.id)) is None

    def test_create_connector(self) -> None:
        service = ConnectorService("user_a")

        connector = service.create_connector(
            ConnectorCreate(name="Contact", destinations=[email_destination()])
        )

        assert connector.owner_id == "user_a"
        assert connector.destinations[0]["type"] == "email"
        assert connector.destinations[0]["enabled"] is True

    def test_update_connector_partial(self) -> None:
        connector = ConnectorFactory.create(owner_id="user_a", name="Old", description="keep")

        updated = ConnectorService("user_a").update_connector(
            str(connector.id),
            ConnectorUpdate(name="New", active=False, destinations=[slack_destination()]),
        )

        assert updated is not None
        connector.refresh_from_db()
        assert connector.name == "New"
        assert connector.description == "keep"
        assert connector.active is False
        assert connector.destinations[0]["type"] == "slack"

    def test_update_missing_connector(self) -> None:
        result = ConnectorService("user_a").update_connector(
            "00000000-0000-0000-0000-000000000000", ConnectorUpdate(name="x")
        )
        assert result is None

    def test_delete_connector_cascades_submissions(self) -> None:
        connector = ConnectorFactory.create(owner_id="user_a")
        connector_id = connector.id
        SubmissionFactory.create(connector=connector)

        assert ConnectorService("user_a").delete_connector(str(connector_id)) is True
        assert not Connector.objects.filter(id=connector_id).exists()
        assert not Submission.objects.filter(connector_id=connector_id).exists()

    def test_delete_other_owner_connector(self) -> None:
        connector = ConnectorFactory.create(owner_id="user_b")

        assert ConnectorService("user_a").delete_connector(str(connector.id)) is False
        assert Connector.objects.filter(id=connector.id).exists()
