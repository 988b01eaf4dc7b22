"""
Shared HTTP response handling for destinations that POST over HTTPS.
"""

import httpx

from .constants import DEFAULT_RETRY_AFTER_SECONDS
from .exceptions import DispatchConfigError, DispatchTransientError

DEFAULT_TIMEOUT_SECONDS = 30.0
RESPONSE_SNIPPET_LENGTH = 200


def parse_retry_after(value: str | None, default: int = DEFAULT_RETRY_AFTER_SECONDS) -> int:
    """Parse a Retry-After header given in seconds; HTTP-dates fall back to ``default``."""
    if not value:
        return default
    try:
        seconds = int(value.strip())
    except ValueError:
        return default
    return seconds if seconds >= 0 else default


def raise_for_response(response: httpx.Response, *, target: str) -> None:
    """
    Map a downstream response to a dispatch outcome.

    2xx returns normally. Not-found and permission failures are
    configuration errors. Rate limiting and everything else is transient.
    """
    status = response.status_code
    if 200 <= status < 300:
        return

    if status == 404:
        raise DispatchConfigError(f"{target} not found. Check the URL.")
    if status in (401, 403, 410):
        raise DispatchConfigError(f"{target} access denied (HTTP {status}).")
    if status == 429:
        retry_after = parse_retry_after(response.headers.get("Retry-After"))
        raise DispatchTransientError(
            f"{target} rate limited. Retry after {retry_after} seconds.",
            retry_after=retry_after,
        )

    snippet = (response.text or "")[:RESPONSE_SNIPPET_LENGTH]
    message = f"{target} returned HTTP {status}"
    if snippet:
        message = f"{message}: {snippet}"
    raise DispatchTransientError(message)


async def post(
    url: str,
    *,
    target: str,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    **kwargs,
) -> httpx.Response:
    """POST and classify the result; network failures are transient."""
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(url, **kwargs)
    except httpx.TimeoutException as e:
        raise DispatchTransientError(f"{target} request timed out after {timeout:g}s") from e
    except httpx.HTTPError as e:
        raise DispatchTransientError(f"{target} request failed: {e}") from e

    raise_for_response(response, target=target)
    return response
