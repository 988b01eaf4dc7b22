"""
Shared test doubles for destination tests.
"""

import hmac
import time
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from apps.destinations.registry import DestinationHandler
from apps.destinations.schemas import ConnectorMeta
from apps.destinations.signing import generate_signature

CONNECTOR = ConnectorMeta(id="3f1c0a1e-0000-4000-8000-000000000001", name="Contact Form")


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class AnyConfig(BaseModel):
    pass


class SpyHandler(DestinationHandler):
    """Handler that records calls and optionally raises."""

    config_model = AnyConfig

    def __init__(self, destination_type: str, error: BaseException | None = None) -> None:
        self.destination_type = destination_type  # type: ignore[misc]
        self.error = error
        self.calls: list[tuple[Mapping[str, Any], Mapping[str, Any], ConnectorMeta]] = []

    async def send(self, config, payload, connector) -> None:
        self.calls.append((config, payload, connector))
        if self.error is not None:
            raise self.error


def verify_signature(
    body: str,
    secret: str,
    signature: str,
    timestamp: int,
    tolerance: int = 300,
) -> bool:
    """Check a delivery signature the way a receiving endpoint would."""
    if abs(int(time.time()) - timestamp) > tolerance:
        return False
    expected, _ = generate_signature(body, secret, timestamp)
    return hmac.compare_digest(expected, signature)
