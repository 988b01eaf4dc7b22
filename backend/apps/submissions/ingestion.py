"""
Ingestion service - the public submission pipeline.

Gates run in a fixed order so that cheap checks (rate limit, payload
validation) happen before any database lookup:

    rate limit -> validate -> look up connector -> active -> insert
    -> dispatch -> record outcomes

Any gate failure raises and ends the request. Once the submission row is
inserted the request succeeds even if every destination fails; recording
outcomes is best-effort.
"""

import json
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError

from apps.connectors.models import Connector
from apps.connectors.services import aget_connector
from apps.core.logging import get_logger
from apps.core.throttling import RateLimitExceeded, SlidingWindowRateLimiter
from apps.destinations.dispatcher import DestinationDispatcher
from apps.destinations.handlers import build_default_registry
from apps.destinations.retry import RetryPolicy
from apps.destinations.schemas import ConnectorMeta

from .exceptions import ConnectorInactive, ConnectorNotFound, SubmissionValidationError
from .services import SubmissionStore
from .validation import validate_submission

logger = get_logger(__name__)


def parse_body(body: bytes) -> Any:
    try:
        return json.loads(body)
    except (UnicodeDecodeError, ValueError) as e:
        raise SubmissionValidationError("Request body must be valid JSON") from e


@dataclass(frozen=True)
class IngestionResult:
    submission_id: str
    results: dict[str, dict[str, Any]]

    def to_body(self) -> dict[str, Any]:
        return {"success": True, "submissionId": self.submission_id, "results": self.results}


class IngestionService:
    """Runs one public submission through the pipeline."""

    def __init__(
        self,
        rate_limiter: SlidingWindowRateLimiter,
        dispatcher: DestinationDispatcher,
        store: SubmissionStore | None = None,
        max_requests: int | None = None,
        window_seconds: float | None = None,
    ):
        self.rate_limiter = rate_limiter
        self.dispatcher = dispatcher
        self.store = store or SubmissionStore()
        self.max_requests = (
            max_requests if max_requests is not None else settings.SUBMISSION_RATE_LIMIT_MAX_REQUESTS
        )
        self.window_seconds = (
            window_seconds
            if window_seconds is not None
            else settings.SUBMISSION_RATE_LIMIT_WINDOW_SECONDS
        )

    def check_rate_limit(self, connector_id: str) -> None:
        result = self.rate_limiter.check(
            connector_id,
            max_requests=self.max_requests,
            window_seconds=self.window_seconds,
        )
        if not result.allowed:
            raise RateLimitExceeded.from_result(result)

    async def lookup(self, connector_id: str) -> Connector:
        try:
            connector = await aget_connector(connector_id)
        except DjangoValidationError:
            # Not a well-formed id, so no connector can match it
            connector = None
        if connector is None:
            raise ConnectorNotFound()
        if not connector.active:
            raise ConnectorInactive()
        return connector

    async def ingest(self, connector_id: str, payload: Any) -> IngestionResult:
        """
        Accept a decoded submission for ``connector_id``.

        Raises:
            RateLimitExceeded: Too many submissions for this connector.
            SubmissionValidationError: Payload failed validation.
            ConnectorNotFound / ConnectorInactive: Lookup gates.
            SubmissionStorageError: The submission could not be stored.
        """
        self.check_rate_limit(connector_id)
        return await self._accept(connector_id, payload)

    async def ingest_body(self, connector_id: str, body: bytes) -> IngestionResult:
        """Like ``ingest``, for a raw request body. Malformed JSON is a validation error."""
        self.check_rate_limit(connector_id)
        return await self._accept(connector_id, parse_body(body))

    async def _accept(self, connector_id: str, payload: Any) -> IngestionResult:
        form_data = validate_submission(payload)
        connector = await self.lookup(connector_id)

        submission = await self.store.insert(connector, form_data)
        logger.info(
            "submission_received",
            **{"connector.id": str(connector.id), "submission.id": str(submission.id)},
            field_count=len(form_data),
            field_names=sorted(form_data),
        )

        start = time.monotonic()
        outcomes = await self.dispatcher.dispatch(
            connector.destinations,
            form_data,
            ConnectorMeta(id=str(connector.id), name=connector.name),
        )
        results = {destination_type: outcome.to_dict() for destination_type, outcome in outcomes.items()}

        try:
            await self.store.update_outcomes(submission, results)
        except Exception:
            logger.exception(
                "submission_outcomes_not_recorded",
                **{"submission.id": str(submission.id)},
            )

        logger.info(
            "submission_processed",
            **{"connector.id": str(connector.id), "submission.id": str(submission.id)},
            destinations=len(results),
            failed=sum(1 for outcome in results.values() if not outcome["success"]),
            duration_ms=(time.monotonic() - start) * 1000,
        )
        return IngestionResult(submission_id=str(submission.id), results=results)


@lru_cache(maxsize=1)
def get_ingestion_service() -> IngestionService:
    """Process-wide service; owns the in-memory rate limiter."""
    return IngestionService(
        rate_limiter=SlidingWindowRateLimiter(
            cleanup_threshold=settings.RATE_LIMIT_CLEANUP_THRESHOLD
        ),
        dispatcher=DestinationDispatcher(
            registry=build_default_registry(),
            retry_policy=RetryPolicy.from_settings(),
        ),
    )
