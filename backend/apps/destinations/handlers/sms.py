"""
SMS destination - texts a short submission summary via AWS End User Messaging.
"""

import asyncio
import re
from collections.abc import Mapping
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError, NoRegionError
from django.conf import settings

from apps.core.logging import get_logger

from .. import aws_client
from ..constants import SMS_MAX_LENGTH, DestinationType
from ..exceptions import DestinationNotImplemented, DispatchConfigError, DispatchTransientError
from ..formatting import display_value, field_label
from ..registry import DestinationHandler
from ..schemas import ConnectorMeta, SmsDestinationConfig, SubmissionData

logger = get_logger(__name__)

E164_PATTERN = re.compile(r"^\+[1-9]\d{6,14}$")

PERMANENT_ERROR_CODES = frozenset(
    {"ValidationException", "ResourceNotFoundException", "AccessDeniedException"}
)


def build_message(payload: SubmissionData, connector: ConnectorMeta) -> str:
    lines = [f"New submission from {connector.name}"]
    lines.extend(f"{field_label(name)}: {display_value(value)}" for name, value in payload.items())
    message = "\n".join(lines)
    if len(message) > SMS_MAX_LENGTH:
        message = message[: SMS_MAX_LENGTH - 3] + "..."
    return message


class SmsHandler(DestinationHandler):
    destination_type = DestinationType.SMS
    config_model = SmsDestinationConfig

    def __init__(self, client_factory=aws_client.get_sms_client) -> None:
        self._client_factory = client_factory

    def _send_sync(self, phone_number: str, message: str) -> str | None:
        client = self._client_factory()
        try:
            response = client.send_text_message(
                DestinationPhoneNumber=phone_number,
                OriginationIdentity=settings.AWS_SMS_ORIGINATION_IDENTITY,
                MessageBody=message,
                MessageType="TRANSACTIONAL",
            )
        except (NoCredentialsError, NoRegionError) as e:
            raise DispatchConfigError(f"SMS service not configured: {e}") from e
        except ClientError as e:
            code = aws_client.client_error_code(e)
            detail = aws_client.client_error_message(e)
            if code in PERMANENT_ERROR_CODES:
                raise DispatchConfigError(f"SMS rejected ({code}): {detail}") from e
            raise DispatchTransientError(f"SMS service error ({code}): {detail}") from e
        except BotoCoreError as e:
            raise DispatchTransientError(f"SMS service error: {e}") from e
        return response.get("MessageId")

    async def send(
        self,
        config: Mapping[str, Any],
        payload: SubmissionData,
        connector: ConnectorMeta,
    ) -> None:
        if not settings.AWS_SMS_ORIGINATION_IDENTITY:
            raise DestinationNotImplemented("SMS delivery is not configured on this server")

        sms_config: SmsDestinationConfig = self.parse_config(config)
        if not E164_PATTERN.match(sms_config.phone_number):
            raise DispatchConfigError(
                "Phone number must be in E.164 format (e.g. +14155551234)",
                field="phone_number",
            )

        message_id = await asyncio.to_thread(
            self._send_sync, sms_config.phone_number, build_message(payload, connector)
        )
        logger.info(
            "sms_destination_sent",
            **{"connector.id": connector.id},
            phone_number=sms_config.phone_number,
            message_id=message_id,
        )
