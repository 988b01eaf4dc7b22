"""
Django Ninja API configuration.
"""

from django.http import HttpRequest
from ninja import NinjaAPI

from apps.core.schemas import HealthResponse

api = NinjaAPI(
    title="Form Relay API",
    version="1.0.0",
    description="Routes public form submissions to email, Slack, Google Sheets, SMS and webhooks.",
    openapi_extra={
        "tags": [
            {
                "name": "health",
                "description": "Service health and readiness checks",
            },
        ],
    },
)


@api.get(
    "/health",
    response=HealthResponse,
    tags=["health"],
    operation_id="healthCheck",
    summary="Health check",
)
def health_check(request: HttpRequest) -> HealthResponse:
    """Health check endpoint for load balancer."""
    return HealthResponse()
