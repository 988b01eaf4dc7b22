"""
Webhook destination - forwards the submission as a signed JSON event.
"""

import asyncio
import json
import uuid
from collections.abc import Mapping
from typing import Any

import httpx
from django.conf import settings

from apps.core.logging import get_logger
from apps.core.url_validation import SSRFError, validate_outbound_url
from apps.core.utils import utc_now_iso

from .. import http
from ..constants import WEBHOOK_EVENT_TYPE, DestinationType
from ..exceptions import DispatchConfigError
from ..registry import DestinationHandler
from ..schemas import ConnectorMeta, SubmissionData, WebhookDestinationConfig
from ..signing import delivery_headers

logger = get_logger(__name__)

# Custom headers may not replace these
PROTECTED_HEADERS = frozenset(
    {
        "content-type",
        "content-length",
        "host",
        "user-agent",
        "x-webhook-id",
        "x-webhook-timestamp",
        "x-webhook-signature",
    }
)


def build_event(payload: SubmissionData, connector: ConnectorMeta, event_id: str) -> dict[str, Any]:
    return {
        "id": event_id,
        "type": WEBHOOK_EVENT_TYPE,
        "timestamp": utc_now_iso(),
        "connector": {"id": connector.id, "name": connector.name},
        "data": dict(payload),
    }


class WebhookHandler(DestinationHandler):
    destination_type = DestinationType.WEBHOOK
    config_model = WebhookDestinationConfig

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def _validate_url(self, url: str) -> str:
        try:
            return await asyncio.to_thread(
                validate_outbound_url, url, resolve_dns=settings.DESTINATION_URL_RESOLVE_DNS
            )
        except SSRFError as e:
            raise DispatchConfigError(f"Invalid webhook URL: {e}", field="url") from e

    async def send(
        self,
        config: Mapping[str, Any],
        payload: SubmissionData,
        connector: ConnectorMeta,
    ) -> None:
        webhook_config: WebhookDestinationConfig = self.parse_config(config)
        url = await self._validate_url(webhook_config.url)

        event_id = f"evt_{uuid.uuid4().hex}"
        body = json.dumps(build_event(payload, connector, event_id), separators=(",", ":"))

        headers = {
            name: value
            for name, value in webhook_config.headers.items()
            if name.lower() not in PROTECTED_HEADERS
        }
        headers.update(delivery_headers(body, event_id, webhook_config.secret))

        await http.post(
            url,
            target="Webhook endpoint",
            transport=self._transport,
            content=body,
            headers=headers,
        )
        logger.info(
            "webhook_destination_sent",
            **{"connector.id": connector.id},
            event_id=event_id,
            signed=bool(webhook_config.secret),
        )
