"""
Tests for RequestContextMiddleware.

Covers request id propagation and structlog context lifecycle for both
sync and async stacks.
"""

from unittest.mock import MagicMock

import pytest
from asgiref.sync import async_to_sync
from django.http import HttpRequest, HttpResponse
from structlog.contextvars import get_contextvars

from apps.core.logging import clear_contextvars
from apps.core.middleware import MAX_REQUEST_ID_LENGTH, REQUEST_ID_HEADER, RequestContextMiddleware


def make_request(path: str = "/submit/abc/", request_id: str | None = None) -> HttpRequest:
    """Create a bare HttpRequest."""
    request = HttpRequest()
    request.path = path
    request.method = "POST"
    request.META = {}
    if request_id is not None:
        request.META["HTTP_X_REQUEST_ID"] = request_id
    return request


@pytest.fixture(autouse=True)
def _clean_context():
    clear_contextvars()
    yield
    clear_contextvars()


class TestSyncMiddleware:
    """Tests for the sync call path."""

    def test_generates_request_id(self) -> None:
        middleware = RequestContextMiddleware(MagicMock(return_value=HttpResponse()))
        request = make_request()

        response = middleware(request)

        assert request.request_id
        assert response[REQUEST_ID_HEADER] == request.request_id

    def test_reuses_incoming_request_id(self) -> None:
        middleware = RequestContextMiddleware(MagicMock(return_value=HttpResponse()))

        response = middleware(make_request(request_id="req-123"))

        assert response[REQUEST_ID_HEADER] == "req-123"

    def test_overlong_request_id_replaced(self) -> None:
        middleware = RequestContextMiddleware(MagicMock(return_value=HttpResponse()))
        incoming = "x" * (MAX_REQUEST_ID_LENGTH + 1)

        response = middleware(make_request(request_id=incoming))

        assert response[REQUEST_ID_HEADER] != incoming

    def test_context_bound_during_request(self) -> None:
        seen: dict = {}

        def get_response(request: HttpRequest) -> HttpResponse:
            seen.update(get_contextvars())
            return HttpResponse()

        middleware = RequestContextMiddleware(get_response)
        middleware(make_request(path="/submit/c1/", request_id="req-9"))

        assert seen["correlation_id"] == "req-9"
        assert seen["http.method"] == "POST"
        assert seen["http.url_details.path"] == "/submit/c1/"

    def test_context_cleared_after_request(self) -> None:
        middleware = RequestContextMiddleware(MagicMock(return_value=HttpResponse()))
        middleware(make_request(request_id="req-1"))

        assert get_contextvars() == {}

    def test_context_cleared_when_view_raises(self) -> None:
        middleware = RequestContextMiddleware(MagicMock(side_effect=RuntimeError("boom")))

        with pytest.raises(RuntimeError):
            middleware(make_request(request_id="req-1"))

        assert get_contextvars() == {}


class TestAsyncMiddleware:
    """Tests for the async call path."""

    def test_async_request_gets_request_id(self) -> None:
        seen: dict = {}

        async def get_response(request: HttpRequest) -> HttpResponse:
            seen.update(get_contextvars())
            return HttpResponse()

        middleware = RequestContextMiddleware(get_response)
        response = async_to_sync(middleware)(make_request(request_id="req-async"))

        assert response[REQUEST_ID_HEADER] == "req-async"
        assert seen["correlation_id"] == "req-async"
