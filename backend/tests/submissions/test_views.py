"""
Tests for the public submission endpoint.
"""

import json
from unittest.mock import patch

import pytest

from apps.core.throttling import SlidingWindowRateLimiter
from apps.destinations.dispatcher import DestinationDispatcher
from apps.destinations.exceptions import DispatchConfigError
from apps.destinations.registry import HandlerRegistry
from apps.destinations.retry import RetryPolicy
from apps.submissions.ingestion import IngestionService
from apps.submissions.models import Submission
from tests.connectors.factories import ConnectorFactory, email_destination, slack_destination
from tests.destinations.helpers import RecordingSleep, SpyHandler

MISSING_ID = "00000000-0000-4000-8000-000000000000"


@pytest.fixture
def service():
    service = IngestionService(
        rate_limiter=SlidingWindowRateLimiter(),
        dispatcher=DestinationDispatcher(
            HandlerRegistry(
                [
                    SpyHandler("email"),
                    SpyHandler("slack", error=DispatchConfigError("Slack webhook not found")),
                ]
            ),
            RetryPolicy(sleep=RecordingSleep()),
        ),
        max_requests=3,
        window_seconds=3600,
    )
    with patch("apps.submissions.views.get_ingestion_service", return_value=service):
        yield service


def post(api_client, connector_id: str, body, content_type: str = "application/json"):
    data = body if isinstance(body, str | bytes) else json.dumps(body)
    return api_client.post(f"/api/submit/{connector_id}", data=data, content_type=content_type)


@pytest.mark.django_db
class TestSubmitView:
    """Tests for POST /api/submit/<connector_id>."""

    def test_accepts_submission(self, api_client, service) -> None:
        connector = ConnectorFactory.create(
            destinations=[email_destination(), slack_destination()]
        )

        response = post(api_client, str(connector.id), {"name": "Ada"})

        assert response.status_code == 200
        assert response["Access-Control-Allow-Origin"] == "*"
        body = response.json()
        assert body["success"] is True
        assert body["results"]["email"] == {"success": True}
        assert body["results"]["slack"]["success"] is False
        assert body["results"]["slack"]["error"] == "Slack webhook not found"
        assert Submission.objects.filter(id=body["submissionId"]).exists()

    def test_trailing_slash_and_short_route(self, api_client, service) -> None:
        connector = ConnectorFactory.create()

        assert api_client.post(
            f"/api/submit/{connector.id}/", data="{}", content_type="application/json"
        ).status_code == 200
        assert api_client.post(
            f"/submit/{connector.id}/", data="{}", content_type="application/json"
        ).status_code == 200
        assert api_client.post(
            f"/submit/{connector.id}", data="{}", content_type="application/json"
        ).status_code == 200

    def test_preflight(self, api_client, service) -> None:
        response = api_client.options(f"/api/submit/{MISSING_ID}")

        assert response.status_code == 200
        assert response["Access-Control-Allow-Origin"] == "*"
        assert "POST" in response["Access-Control-Allow-Methods"]
        assert response["Access-Control-Max-Age"] == "86400"

    def test_get_not_allowed(self, api_client, service) -> None:
        assert api_client.get(f"/api/submit/{MISSING_ID}").status_code == 405

    def test_malformed_json(self, api_client, service) -> None:
        response = post(api_client, MISSING_ID, "{not json")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_validation_error_names_field(self, api_client, service) -> None:
        connector = ConnectorFactory.create()

        response = post(api_client, str(connector.id), {"nested": [1, 2]})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["field"] == "nested"
        assert "got array" in body["error"]
        assert "timestamp" in body

    def test_unknown_connector(self, api_client, service) -> None:
        response = post(api_client, MISSING_ID, {"name": "Ada"})

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_non_uuid_connector_id(self, api_client, service) -> None:
        response = post(api_client, "contact-form", {"name": "Ada"})

        assert response.status_code == 404

    def test_inactive_connector(self, api_client, service) -> None:
        connector = ConnectorFactory.create(active=False)

        response = post(api_client, str(connector.id), {"name": "Ada"})

        assert response.status_code == 403
        assert response.json()["code"] == "CONNECTOR_INACTIVE"
        assert not Submission.objects.exists()

    def test_rate_limited(self, api_client, service) -> None:
        connector = ConnectorFactory.create()
        for _ in range(3):
            assert post(api_client, str(connector.id), {"name": "Ada"}).status_code == 200

        response = post(api_client, str(connector.id), {"name": "Ada"})

        assert response.status_code == 429
        body = response.json()
        assert body["code"] == "RATE_LIMIT_EXCEEDED"
        assert body["remaining"] == 0
        assert isinstance(body["resetTime"], int)
        assert int(response["Retry-After"]) > 0
        assert Submission.objects.count() == 3

    def test_unexpected_error_is_500(self, api_client, service) -> None:
        connector = ConnectorFactory.create()

        with patch.object(service.store, "insert", side_effect=RuntimeError("db down")):
            response = post(api_client, str(connector.id), {"name": "Ada"})

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "INTERNAL_ERROR"
        assert "details" not in body

    def test_request_id_header(self, api_client, service) -> None:
        response = post(api_client, MISSING_ID, {"name": "Ada"}, content_type="application/json")

        assert response["X-Request-ID"]


class TestHealth:
    def test_health(self, api_client) -> None:
        response = api_client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
