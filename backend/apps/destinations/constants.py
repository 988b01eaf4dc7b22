"""
Destination constants.
"""

from django.db import models


class DestinationType(models.TextChoices):
    """Destination type tags as stored in a connector's destination list."""

    EMAIL = "email", "Email"
    SLACK = "slack", "Slack"
    SHEETS = "sheets", "Google Sheets"
    SMS = "sms", "SMS"
    WEBHOOK = "webhook", "Webhook"


DEFAULT_EMAIL_FROM_NAME = "Form Connector"
DEFAULT_SHEET_NAME = "Form Submissions"

# Header cells the spreadsheet handler fills itself
SHEET_TIMESTAMP_HEADER = "Timestamp"
SHEET_CONNECTOR_HEADER = "Connector Name"

# Default wait when a downstream returns 429 without a usable Retry-After
DEFAULT_RETRY_AFTER_SECONDS = 60

SMS_MAX_LENGTH = 1600
EMPTY_VALUE_PLACEHOLDER = "(empty)"

WEBHOOK_EVENT_TYPE = "submission.created"
WEBHOOK_USER_AGENT = "FormRelay-Webhooks/1.0"
