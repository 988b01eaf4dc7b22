"""
Tests for the Connector model.
"""

import pytest

from .factories import ConnectorFactory, email_destination, slack_destination


@pytest.mark.django_db
class TestConnector:
    """Tests for Connector properties."""

    def test_ingestion_url(self) -> None:
        connector = ConnectorFactory.create()
        assert connector.ingestion_url == f"https://forms.example.com/api/submit/{connector.id}"

    def test_defaults(self) -> None:
        connector = ConnectorFactory.create(destinations=[])
        assert connector.active is True
        assert connector.destination_list == []

    def test_destination_list_flat(self) -> None:
        destinations = [email_destination(), slack_destination()]
        connector = ConnectorFactory.create(destinations=destinations)

        assert connector.destination_list == destinations

    def test_destination_list_unwraps_double_nesting(self) -> None:
        destinations = [email_destination(), slack_destination()]
        connector = ConnectorFactory.create(destinations=[destinations])

        assert connector.destination_list == destinations

    def test_enabled_destination_types(self) -> None:
        connector = ConnectorFactory.create(
            destinations=[email_destination(), slack_destination(enabled=False)]
        )
        assert connector.enabled_destination_types == ["email"]

    def test_str(self) -> None:
        connector = ConnectorFactory.create(name="Contact")
        assert str(connector) == f"Contact ({connector.id})"
