"""
Tests for shared HTTP response classification.
"""

import httpx
import pytest

from apps.destinations.exceptions import DispatchConfigError, DispatchTransientError
from apps.destinations.http import parse_retry_after, raise_for_response


class TestParseRetryAfter:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("30", 30), (" 5 ", 5), (None, 60), ("", 60), ("-1", 60), ("Wed, 21 Oct 2026", 60)],
    )
    def test_values(self, value, expected) -> None:
        assert parse_retry_after(value) == expected


class TestRaiseForResponse:
    """Tests for status code mapping."""

    @pytest.mark.parametrize("status", [200, 201, 204])
    def test_success(self, status: int) -> None:
        raise_for_response(httpx.Response(status), target="Endpoint")

    @pytest.mark.parametrize("status", [401, 403, 404, 410])
    def test_config_errors(self, status: int) -> None:
        with pytest.raises(DispatchConfigError):
            raise_for_response(httpx.Response(status), target="Endpoint")

    def test_rate_limit_default_retry_after(self) -> None:
        with pytest.raises(DispatchTransientError) as exc_info:
            raise_for_response(httpx.Response(429), target="Endpoint")

        assert exc_info.value.retry_after == 60
        assert str(exc_info.value) == "Endpoint rate limited. Retry after 60 seconds."

    def test_server_error_truncates_body(self) -> None:
        with pytest.raises(DispatchTransientError) as exc_info:
            raise_for_response(httpx.Response(502, text="x" * 500), target="Endpoint")

        assert str(exc_info.value) == "Endpoint returned HTTP 502: " + "x" * 200
        assert exc_info.value.retry_after is None
