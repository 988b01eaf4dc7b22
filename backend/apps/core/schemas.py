"""
Core schemas - shared Pydantic models for API responses.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ErrorResponse(BaseModel):
    """
    Standard error response format.

    Serialized with camelCase keys (``resetTime``) to match what browser
    form integrations already parse.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "error": "Connector not found",
                "code": "NOT_FOUND",
                "timestamp": "2024-01-01T00:00:00+00:00",
            }
        },
    )

    error: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    field: str | None = Field(default=None, description="Offending field, for validation errors")
    reset_time: int | None = Field(default=None, description="Unix ms when the rate limit resets")
    remaining: int | None = Field(default=None, description="Requests left in the current window")
    details: str | None = Field(default=None, description="Debug detail (DEBUG only)")

    def to_body(self) -> dict:
        """Serialize for a JSON response, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class HealthResponse(BaseModel):
    """Health check payload."""

    status: str = "ok"
