"""
Destination handler base class and type registry.
"""

from collections.abc import Iterator, Mapping
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

from .exceptions import DispatchConfigError
from .schemas import ConnectorMeta, SubmissionData


class DestinationHandler:
    """
    Delivers one submission to one destination of a given type.

    Subclasses set ``destination_type`` and ``config_model`` and implement
    ``send``. A handler returns normally on success and raises a
    ``DispatchError`` subclass on failure; retrying is not its concern.
    """

    destination_type: ClassVar[str]
    config_model: ClassVar[type[BaseModel]]

    def parse_config(self, config: Mapping[str, Any]) -> Any:
        """Validate the raw destination config into ``config_model``."""
        try:
            return self.config_model.model_validate(dict(config))
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            if first["type"] == "missing":
                message = f"Missing required {self.destination_type} setting: {field}"
            else:
                message = f"Invalid {self.destination_type} setting {field}: {first['msg']}"
            raise DispatchConfigError(message, field=field) from e

    async def send(
        self,
        config: Mapping[str, Any],
        payload: SubmissionData,
        connector: ConnectorMeta,
    ) -> None:
        raise NotImplementedError


class HandlerRegistry:
    """Maps destination type tags to handler instances."""

    def __init__(self, handlers: list[DestinationHandler] | None = None) -> None:
        self._handlers: dict[str, DestinationHandler] = {}
        for handler in handlers or []:
            self.register(handler)

    def register(self, handler: DestinationHandler) -> None:
        self._handlers[handler.destination_type] = handler

    def get(self, destination_type: str) -> DestinationHandler | None:
        return self._handlers.get(destination_type)

    def __contains__(self, destination_type: object) -> bool:
        return destination_type in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)
