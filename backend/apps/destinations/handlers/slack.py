"""
Slack destination - posts a Block Kit message to an incoming webhook.
"""

import asyncio
import time
from collections.abc import Mapping
from typing import Any

import httpx
from django.conf import settings

from apps.core.logging import get_logger
from apps.core.url_validation import SLACK_WEBHOOK_DOMAINS, SSRFError, validate_outbound_url
from apps.core.utils import utc_now_iso

from .. import http
from ..constants import DestinationType
from ..exceptions import DispatchConfigError
from ..formatting import display_value, escape_mrkdwn, field_label
from ..registry import DestinationHandler
from ..schemas import ConnectorMeta, SlackDestinationConfig, SubmissionData

logger = get_logger(__name__)


def _field(name: str, value: Any) -> dict[str, str]:
    return {
        "type": "mrkdwn",
        "text": f"*{escape_mrkdwn(field_label(name))}:*\n{escape_mrkdwn(display_value(value))}",
    }


def build_message(payload: SubmissionData, connector: ConnectorMeta) -> dict[str, Any]:
    """Block Kit message: header, fields two per section, then a context footer."""
    connector_name = escape_mrkdwn(connector.name)
    blocks: list[dict[str, Any]] = [
        {
            "type": "header",
            "text": {
                "type": "plain_text",
                "text": f"New Form Submission: {connector.name}"[:150],
            },
        },
        {"type": "divider"},
    ]

    entries = list(payload.items())
    for i in range(0, len(entries), 2):
        fields = [_field(*entries[i])]
        if i + 1 < len(entries):
            fields.append(_field(*entries[i + 1]))
        else:
            fields.append({"type": "mrkdwn", "text": " "})
        blocks.append({"type": "section", "fields": fields})

    blocks.append({"type": "divider"})
    blocks.append(
        {
            "type": "context",
            "elements": [
                {
                    "type": "mrkdwn",
                    "text": (
                        f"*Connector:* {connector_name} | *Time:* "
                        f"<!date^{int(time.time())}^{{date_short_pretty}} at {{time}}|{utc_now_iso()}>"
                    ),
                }
            ],
        }
    )

    return {"blocks": blocks, "text": f"New form submission from {connector.name}"}


class SlackHandler(DestinationHandler):
    destination_type = DestinationType.SLACK
    config_model = SlackDestinationConfig

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def _validate_url(self, url: str) -> str:
        try:
            return await asyncio.to_thread(
                validate_outbound_url,
                url,
                allowed_domains=SLACK_WEBHOOK_DOMAINS,
                resolve_dns=settings.DESTINATION_URL_RESOLVE_DNS,
            )
        except SSRFError as e:
            raise DispatchConfigError(f"Invalid Slack webhook URL: {e}", field="webhook_url") from e

    async def send(
        self,
        config: Mapping[str, Any],
        payload: SubmissionData,
        connector: ConnectorMeta,
    ) -> None:
        slack_config: SlackDestinationConfig = self.parse_config(config)
        url = await self._validate_url(slack_config.webhook_url)

        await http.post(
            url,
            target="Slack webhook",
            transport=self._transport,
            json=build_message(payload, connector),
        )
        logger.info("slack_destination_sent", **{"connector.id": connector.id})
