"""
Destination dispatcher - fans a submission out to every enabled destination.
"""

import asyncio
import time
from collections.abc import Mapping
from typing import Any

from apps.core.logging import get_logger

from .registry import DestinationHandler, HandlerRegistry
from .retry import RetryPolicy
from .schemas import ConnectorMeta, DispatchOutcome, SubmissionData, flatten_destinations

logger = get_logger(__name__)


class DestinationDispatcher:
    """
    Run every enabled destination of a connector concurrently.

    A destination is dispatched only when its ``enabled`` flag is exactly
    ``True`` and its ``type`` has a registered handler. Each dispatch is
    isolated: whatever one handler raises becomes that destination's
    failed outcome and never affects the others.

    Outcomes are keyed by destination type. When a connector lists the
    same type twice, the later entry's outcome is kept.
    """

    def __init__(self, registry: HandlerRegistry, retry_policy: RetryPolicy | None = None):
        self.registry = registry
        self.retry_policy = retry_policy or RetryPolicy()

    def _enabled(
        self, destinations: Any
    ) -> list[tuple[str, DestinationHandler, Mapping[str, Any]]]:
        selected: list[tuple[str, DestinationHandler, Mapping[str, Any]]] = []
        for entry in flatten_destinations(destinations):
            if not isinstance(entry, Mapping):
                continue
            destination_type = entry.get("type")
            handler = (
                self.registry.get(destination_type) if isinstance(destination_type, str) else None
            )
            if handler is None:
                logger.warning("destination_type_unknown", **{"destination.type": destination_type})
                continue
            if entry.get("enabled") is not True:
                continue
            config = entry.get("config")
            if not isinstance(config, Mapping):
                config = {}
            selected.append((destination_type, handler, config))
        return selected

    async def _dispatch_one(
        self,
        destination_type: str,
        handler: DestinationHandler,
        config: Mapping[str, Any],
        payload: SubmissionData,
        connector: ConnectorMeta,
    ) -> DispatchOutcome:
        start = time.monotonic()
        try:
            await self.retry_policy.run(
                lambda: handler.send(config, payload, connector),
                label=destination_type,
            )
        except Exception as e:
            logger.warning(
                "destination_dispatch_failed",
                **{"destination.type": destination_type, "connector.id": connector.id},
                error=str(e),
                duration_ms=(time.monotonic() - start) * 1000,
            )
            return DispatchOutcome.failed(str(e))

        logger.info(
            "destination_dispatch_succeeded",
            **{"destination.type": destination_type, "connector.id": connector.id},
            duration_ms=(time.monotonic() - start) * 1000,
        )
        return DispatchOutcome.ok()

    async def dispatch(
        self,
        destinations: Any,
        payload: SubmissionData,
        connector: ConnectorMeta,
    ) -> dict[str, DispatchOutcome]:
        """
        Deliver ``payload`` to every enabled destination.

        Args:
            destinations: The connector's destination list (flat or
                wrapped once in an outer list).
            payload: Validated submission fields.
            connector: Connector id and name, for rendering.

        Returns:
            Mapping of destination type to outcome. Empty when nothing is
            enabled.
        """
        selected = self._enabled(destinations)
        if not selected:
            return {}

        outcomes = await asyncio.gather(
            *(
                self._dispatch_one(destination_type, handler, config, payload, connector)
                for destination_type, handler, config in selected
            )
        )

        results: dict[str, DispatchOutcome] = {}
        for (destination_type, _handler, _config), outcome in zip(selected, outcomes, strict=True):
            results[destination_type] = outcome
        return results
