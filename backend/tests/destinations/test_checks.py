"""
Tests for destination backend system checks.
"""

from apps.destinations.checks import check_destination_backends, missing_settings


class TestMissingSettings:
    def test_reports_blank_settings(self, settings) -> None:
        settings.AWS_SMS_REGION = "us-east-1"
        settings.AWS_SMS_ORIGINATION_IDENTITY = "  "

        assert missing_settings("sms") == ["AWS_SMS_ORIGINATION_IDENTITY"]

    def test_types_without_requirements(self) -> None:
        assert missing_settings("slack") == []
        assert missing_settings("webhook") == []


class TestCheckDestinationBackends:
    def test_warns_for_unconfigured_sheets(self, settings) -> None:
        settings.GOOGLE_SERVICE_ACCOUNT_JSON = ""

        warnings = check_destination_backends(None)

        sheets = [w for w in warnings if "GOOGLE_SERVICE_ACCOUNT_JSON" in w.msg]
        assert len(sheets) == 1
        assert sheets[0].id.startswith("destinations.W")

    def test_no_warnings_when_configured(self, settings) -> None:
        settings.AWS_SES_REGION = "us-east-1"
        settings.AWS_SMS_REGION = "us-east-1"
        settings.AWS_SMS_ORIGINATION_IDENTITY = "+15550000000"
        settings.GOOGLE_SERVICE_ACCOUNT_JSON = '{"client_email": "x", "private_key": "y"}'

        assert check_destination_backends(None) == []
