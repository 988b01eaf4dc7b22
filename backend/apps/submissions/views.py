"""
Public submission endpoint.

A plain async Django view rather than a Ninja operation: it must answer
CORS preflight for any origin, read the raw body to report malformed
JSON as a validation error, and shape every error body itself.
"""

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps.core.logging import get_logger
from apps.core.schemas import ErrorResponse
from apps.core.throttling import RateLimitExceeded
from apps.core.utils import get_client_ip

from .exceptions import IngestionError, SubmissionValidationError
from .ingestion import get_ingestion_service

logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}


def _json(body: dict, status: int = 200, **headers: str) -> JsonResponse:
    response = JsonResponse(body, status=status)
    response["Access-Control-Allow-Origin"] = CORS_HEADERS["Access-Control-Allow-Origin"]
    for name, value in headers.items():
        response[name] = value
    return response


def _error(error: ErrorResponse, status: int, **headers: str) -> JsonResponse:
    return _json(error.to_body(), status=status, **headers)


@csrf_exempt
@require_http_methods(["POST", "OPTIONS"])
async def submit(request: HttpRequest, connector_id: str) -> HttpResponse:
    """
    Accept a form submission for a connector.

    Returns 200 with ``{success, submissionId, results}`` once the
    submission is stored, whatever happened at each destination.
    """
    if request.method == "OPTIONS":
        response = HttpResponse(status=200)
        for name, value in CORS_HEADERS.items():
            response[name] = value
        return response

    service = get_ingestion_service()
    try:
        result = await service.ingest_body(connector_id, request.body)
    except RateLimitExceeded as e:
        logger.warning(
            "submission_rate_limited",
            **{"connector.id": connector_id},
            client_ip=get_client_ip(request),
        )
        return _error(
            ErrorResponse(
                error=str(e),
                code="RATE_LIMIT_EXCEEDED",
                reset_time=int(e.reset_time * 1000) if e.reset_time is not None else None,
                remaining=e.remaining,
            ),
            status=429,
            **{"Retry-After": str(e.retry_after)},
        )
    except SubmissionValidationError as e:
        logger.info(
            "submission_rejected",
            **{"connector.id": connector_id},
            code=e.code,
            reason=e.message,
        )
        return _error(ErrorResponse(error=e.message, code=e.code, field=e.field), e.status_code)
    except IngestionError as e:
        logger.info("submission_rejected", **{"connector.id": connector_id}, code=e.code)
        return _error(ErrorResponse(error=e.message, code=e.code), e.status_code)
    except Exception as e:
        logger.exception("submission_failed", **{"connector.id": connector_id})
        return _error(
            ErrorResponse(
                error="Internal server error",
                code="INTERNAL_ERROR",
                details=str(e) if settings.DEBUG else None,
            ),
            status=500,
        )

    return _json(result.to_body())
