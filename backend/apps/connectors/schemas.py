"""
Connector schemas (Pydantic models for create/update payloads).
"""

from typing import Any

from ninja import Schema
from pydantic import Field, field_validator

from apps.destinations.constants import DestinationType
from apps.destinations.schemas import flatten_destinations


class DestinationConfigIn(Schema):
    """One destination entry as submitted by a connector owner."""

    type: DestinationType
    enabled: bool = True
    config: dict[str, Any] = Field(default_factory=dict)


def _normalize(value: Any) -> Any:
    # Accept the legacy double-nested shape and store it flat
    if isinstance(value, list):
        return flatten_destinations(value)
    return value


class ConnectorCreate(Schema):
    """Schema for creating a connector."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=2000)
    destinations: list[DestinationConfigIn] = Field(default_factory=list)
    active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("destinations", mode="before")
    @classmethod
    def flatten(cls, v: Any) -> Any:
        return _normalize(v)


class ConnectorUpdate(Schema):
    """Schema for updating a connector. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    destinations: list[DestinationConfigIn] | None = None
    active: bool | None = None

    @field_validator("destinations", mode="before")
    @classmethod
    def flatten(cls, v: Any) -> Any:
        return _normalize(v)


def destinations_to_json(destinations: list[DestinationConfigIn]) -> list[dict[str, Any]]:
    """Storage form of validated destination entries."""
    return [entry.model_dump(mode="json") for entry in destinations]
