"""
Email destination - sends a formatted submission summary through AWS SES.
"""

import asyncio
from collections.abc import Mapping
from email.utils import formataddr
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError, NoRegionError
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.template.loader import render_to_string

from apps.core.logging import get_logger
from apps.core.utils import utc_now_iso

from .. import aws_client
from ..constants import DestinationType
from ..exceptions import DispatchConfigError, DispatchTransientError
from ..formatting import display_value, field_label
from ..registry import DestinationHandler
from ..schemas import ConnectorMeta, EmailDestinationConfig, SubmissionData

logger = get_logger(__name__)

# SES error codes retrying cannot fix
PERMANENT_ERROR_CODES = frozenset(
    {
        "MessageRejected",
        "MailFromDomainNotVerifiedException",
        "ConfigurationSetDoesNotExistException",
        "InvalidParameterValue",
        "AccessDenied",
        "AccessDeniedException",
    }
)


def _single_line(value: str) -> str:
    return " ".join(value.splitlines()).strip()


def build_subject(config: EmailDestinationConfig, connector: ConnectorMeta) -> str:
    return _single_line(config.subject or f"New Form Submission - {connector.name}")


def build_text_body(payload: SubmissionData, connector: ConnectorMeta) -> str:
    lines = [f"New Form Submission from {connector.name}", ""]
    lines.extend(f"{field_label(name)}: {display_value(value)}" for name, value in payload.items())
    return "\n".join(lines) + "\n"


def build_html_body(payload: SubmissionData, connector: ConnectorMeta) -> str:
    """Render the HTML summary. Template autoescaping covers every interpolated value."""
    return render_to_string(
        "destinations/email/submission.html",
        {
            "connector_name": connector.name,
            "fields": [
                {"label": field_label(name), "value": display_value(value)}
                for name, value in payload.items()
            ],
            "submitted_at": utc_now_iso(),
        },
    )


class EmailHandler(DestinationHandler):
    destination_type = DestinationType.EMAIL
    config_model = EmailDestinationConfig

    def __init__(self, client_factory=aws_client.get_ses_client) -> None:
        self._client_factory = client_factory

    def _validate_addresses(self, config: EmailDestinationConfig) -> None:
        for field, address in (("to_email", config.to_email), ("from_email", config.from_email)):
            try:
                validate_email(address)
            except ValidationError as e:
                raise DispatchConfigError(f"Invalid email address in {field}", field=field) from e

    def _send_sync(self, message: dict[str, Any]) -> str | None:
        client = self._client_factory()
        try:
            response = client.send_email(**message)
        except (NoCredentialsError, NoRegionError) as e:
            raise DispatchConfigError(f"Email service not configured: {e}") from e
        except ClientError as e:
            code = aws_client.client_error_code(e)
            detail = aws_client.client_error_message(e)
            if code in PERMANENT_ERROR_CODES:
                raise DispatchConfigError(f"Email rejected ({code}): {detail}") from e
            raise DispatchTransientError(f"Email service error ({code}): {detail}") from e
        except BotoCoreError as e:
            raise DispatchTransientError(f"Email service error: {e}") from e
        return response.get("MessageId")

    async def send(
        self,
        config: Mapping[str, Any],
        payload: SubmissionData,
        connector: ConnectorMeta,
    ) -> None:
        email_config: EmailDestinationConfig = self.parse_config(config)
        self._validate_addresses(email_config)

        from_name = _single_line(email_config.from_name or settings.EMAIL_DEFAULT_FROM_NAME)
        message = {
            "Source": formataddr((from_name, email_config.from_email)),
            "Destination": {"ToAddresses": [email_config.to_email]},
            "Message": {
                "Subject": {"Data": build_subject(email_config, connector), "Charset": "UTF-8"},
                "Body": {
                    "Text": {"Data": build_text_body(payload, connector), "Charset": "UTF-8"},
                    "Html": {"Data": build_html_body(payload, connector), "Charset": "UTF-8"},
                },
            },
        }

        message_id = await asyncio.to_thread(self._send_sync, message)
        logger.info(
            "email_destination_sent",
            **{"connector.id": connector.id},
            message_id=message_id,
        )
