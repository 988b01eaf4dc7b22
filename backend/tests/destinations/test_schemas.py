"""
Tests for destination config models and outcomes.
"""

import pytest

from apps.destinations.exceptions import DispatchConfigError
from apps.destinations.handlers import EmailHandler, SheetsHandler, SmsHandler, WebhookHandler
from apps.destinations.schemas import (
    DispatchOutcome,
    EmailDestinationConfig,
    SheetsDestinationConfig,
    SlackDestinationConfig,
    flatten_destinations,
)


class TestConfigAliases:
    """snake_case and camelCase keys are equivalent."""

    def test_email_snake_case(self) -> None:
        config = EmailDestinationConfig.model_validate(
            {"to_email": "a@example.com", "from_email": "b@example.com", "from_name": "Forms"}
        )
        assert (config.to_email, config.from_email, config.from_name) == (
            "a@example.com",
            "b@example.com",
            "Forms",
        )

    def test_email_camel_case(self) -> None:
        config = EmailDestinationConfig.model_validate(
            {"toEmail": "a@example.com", "fromEmail": "b@example.com", "fromName": "Forms"}
        )
        assert (config.to_email, config.from_email, config.from_name) == (
            "a@example.com",
            "b@example.com",
            "Forms",
        )

    def test_slack_camel_case(self) -> None:
        config = SlackDestinationConfig.model_validate({"webhookUrl": "https://hooks.slack.com/x"})
        assert config.webhook_url == "https://hooks.slack.com/x"

    def test_sheets_default_sheet_name(self) -> None:
        config = SheetsDestinationConfig.model_validate({"spreadsheetId": "abc"})
        assert config.sheet_name == "Form Submissions"

    def test_unknown_keys_ignored(self) -> None:
        config = SlackDestinationConfig.model_validate(
            {"webhook_url": "https://hooks.slack.com/x", "channel": "#forms"}
        )
        assert config.webhook_url == "https://hooks.slack.com/x"


class TestParseConfig:
    """Handler config parsing errors."""

    def test_missing_required_field_names_it(self) -> None:
        with pytest.raises(DispatchConfigError) as exc_info:
            EmailHandler().parse_config({"from_email": "b@example.com"})

        assert exc_info.value.field == "to_email"
        assert "to_email" in str(exc_info.value)

    def test_blank_required_field_rejected(self) -> None:
        with pytest.raises(DispatchConfigError):
            SheetsHandler().parse_config({"spreadsheet_id": "   "})

    @pytest.mark.parametrize("key", ["phone_number", "phoneNumber", "to"])
    def test_sms_phone_aliases(self, key: str) -> None:
        config = SmsHandler().parse_config({key: "+14155551234"})
        assert config.phone_number == "+14155551234"

    def test_webhook_headers_must_be_strings(self) -> None:
        with pytest.raises(DispatchConfigError):
            WebhookHandler().parse_config({"url": "https://example.com", "headers": ["x"]})


class TestFlattenDestinations:
    """Tests for legacy double-nesting normalization."""

    def test_flat_list_unchanged(self) -> None:
        assert flatten_destinations([{"type": "email"}]) == [{"type": "email"}]

    def test_unwraps_one_level(self) -> None:
        assert flatten_destinations([[{"type": "email"}, {"type": "slack"}]]) == [
            {"type": "email"},
            {"type": "slack"},
        ]

    @pytest.mark.parametrize("value", [None, [], {}, "email"])
    def test_non_lists_empty(self, value) -> None:
        assert flatten_destinations(value) == []


class TestDispatchOutcome:
    """Tests for outcome serialization."""

    def test_success_has_no_error_or_timestamp(self) -> None:
        assert DispatchOutcome.ok().to_dict() == {"success": True}

    def test_failure_carries_error_and_timestamp(self) -> None:
        data = DispatchOutcome.failed("boom").to_dict()

        assert data["success"] is False
        assert data["error"] == "boom"
        assert isinstance(data["timestamp"], str)

    def test_failure_with_empty_message(self) -> None:
        assert DispatchOutcome.failed("").error == "Unknown error"
