"""
Shared pytest fixtures for all tests.

Factories
---------
Import factories directly from their modules:

    from tests.connectors.factories import ConnectorFactory
    from tests.submissions.factories import SubmissionFactory

Example usage:

    @pytest.mark.django_db
    def test_something():
        connector = ConnectorFactory.create(destinations=[email_destination()])
"""

import pytest
from django.test import Client, RequestFactory

from apps.core.logging import clear_contextvars


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Keep structlog context from leaking between tests."""
    clear_contextvars()
    yield
    clear_contextvars()


@pytest.fixture
def request_factory() -> RequestFactory:
    """
    Django request factory for unit testing views.

    Use this when you need to call a view function directly without going
    through URL routing and middleware.
    """
    return RequestFactory()


@pytest.fixture
def api_client() -> Client:
    """
    Django test client for full HTTP request/response cycle tests.

    Example:
        def test_health(api_client):
            response = api_client.get("/api/v1/health")
            assert response.status_code == 200
    """
    return Client()
