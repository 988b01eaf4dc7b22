"""
Destination schemas - configuration models and dispatch outcomes.

Connector owners have stored destination configs with both snake_case and
camelCase keys over time. Each config model accepts either spelling and
exposes one canonical shape, so handlers never branch on naming.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from apps.core.utils import utc_now

from .constants import DEFAULT_SHEET_NAME

Scalar = str | int | float | bool | None
SubmissionData = Mapping[str, Scalar]


@dataclass(frozen=True)
class ConnectorMeta:
    """Connector details handlers may render (never the destination list)."""

    id: str
    name: str


# =============================================================================
# Destination configuration
# =============================================================================


class DestinationConfigModel(BaseModel):
    """Base for per-type config models."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, frozen=True)


class EmailDestinationConfig(DestinationConfigModel):
    to_email: str = Field(..., min_length=1, validation_alias=AliasChoices("to_email", "toEmail"))
    from_email: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("from_email", "fromEmail")
    )
    from_name: str | None = Field(
        default=None, validation_alias=AliasChoices("from_name", "fromName")
    )
    subject: str | None = None


class SlackDestinationConfig(DestinationConfigModel):
    webhook_url: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("webhook_url", "webhookUrl")
    )


class SheetsDestinationConfig(DestinationConfigModel):
    spreadsheet_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("spreadsheet_id", "spreadsheetId")
    )
    sheet_name: str = Field(
        default=DEFAULT_SHEET_NAME,
        min_length=1,
        validation_alias=AliasChoices("sheet_name", "sheetName"),
    )


class SmsDestinationConfig(DestinationConfigModel):
    phone_number: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("phone_number", "phoneNumber", "to")
    )


class WebhookDestinationConfig(DestinationConfigModel):
    url: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("url", "webhook_url", "webhookUrl")
    )
    secret: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)


def flatten_destinations(destinations: Any) -> list[Any]:
    """
    Return the destination list as a flat sequence.

    Older connectors stored ``[[{...}, {...}]]`` instead of ``[{...}, {...}]``.
    Only one level of nesting is unwrapped.
    """
    if not destinations or not isinstance(destinations, Sequence) or isinstance(destinations, str):
        return []
    if isinstance(destinations[0], list):
        return list(destinations[0])
    return list(destinations)


# =============================================================================
# Dispatch outcomes
# =============================================================================


class DispatchOutcome(BaseModel):
    """Result of dispatching one submission to one destination."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error: str | None = None
    timestamp: datetime | None = None

    @classmethod
    def ok(cls) -> "DispatchOutcome":
        return cls(success=True)

    @classmethod
    def failed(cls, error: str) -> "DispatchOutcome":
        return cls(success=False, error=error or "Unknown error", timestamp=utc_now())

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form stored on the submission and returned to the caller."""
        return self.model_dump(mode="json", exclude_none=True)
