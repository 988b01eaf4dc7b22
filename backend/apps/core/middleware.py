"""
Core middleware.
"""

from collections.abc import Awaitable, Callable
from uuid import uuid4

from asgiref.sync import iscoroutinefunction, markcoroutinefunction
from django.http import HttpRequest, HttpResponse

from apps.core.logging import bind_contextvars, clear_contextvars

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


def _request_id(request: HttpRequest) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH:
        return incoming
    return str(uuid4())


class RequestContextMiddleware:
    """
    Binds request correlation fields into structlog contextvars.

    Sets ``request.request_id`` and echoes it in the ``X-Request-ID``
    response header. Context is cleared once the response is produced so
    it cannot leak into the next request handled by the same worker.

    Supports both sync and async stacks so async views (public submission
    ingestion) are not forced through a thread.
    """

    sync_capable = True
    async_capable = True

    def __init__(
        self,
        get_response: Callable[[HttpRequest], HttpResponse]
        | Callable[[HttpRequest], Awaitable[HttpResponse]],
    ) -> None:
        self.get_response = get_response
        if iscoroutinefunction(self.get_response):
            markcoroutinefunction(self)

    def _bind(self, request: HttpRequest) -> str:
        request_id = _request_id(request)
        request.request_id = request_id  # type: ignore[attr-defined]
        clear_contextvars()
        bind_contextvars(
            correlation_id=request_id,
            **{
                "http.method": request.method,
                "http.url_details.path": request.path,
            },
        )
        return request_id

    def __call__(self, request: HttpRequest) -> HttpResponse | Awaitable[HttpResponse]:
        if iscoroutinefunction(self):
            return self.__acall__(request)

        request_id = self._bind(request)
        try:
            response = self.get_response(request)
            response[REQUEST_ID_HEADER] = request_id  # type: ignore[index]
            return response  # type: ignore[return-value]
        finally:
            clear_contextvars()

    async def __acall__(self, request: HttpRequest) -> HttpResponse:
        request_id = self._bind(request)
        try:
            response = await self.get_response(request)  # type: ignore[misc]
            response[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_contextvars()
