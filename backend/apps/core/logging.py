"""
Structured logging configuration using structlog.

Every log line carries the request correlation fields bound by
``RequestContextMiddleware`` plus whatever the caller passes as key/value
context, so a single submission can be followed from ingestion through
each destination dispatch.

Usage:
    from apps.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("submission_received", connector_id="...", field_count=3)

Field naming:
    - trace_id: Request correlation ID
    - connector.id: Connector the submission was sent to
    - submission.id: Stored submission identifier
    - destination.type: Destination being dispatched (email, slack, ...)
    - http.method / http.url_details.path: Inbound request line
    - duration: Duration in nanoseconds (converted from duration_ms)
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def _rename_correlation_id(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Expose correlation_id as trace_id, always as a string."""
    if "correlation_id" in event_dict:
        event_dict["trace_id"] = str(event_dict.pop("correlation_id"))
    return event_dict


def _convert_duration_to_nanoseconds(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Convert duration_ms to duration (nanoseconds)."""
    if "duration_ms" in event_dict:
        duration_ms = event_dict.pop("duration_ms")
        event_dict["duration"] = int(duration_ms * 1_000_000)
    return event_dict


def _mask_phone_numbers(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Reduce phone numbers to their last four digits.

    SMS destinations log the recipient; only the suffix is kept.
    """
    phone = event_dict.get("phone_number")
    if isinstance(phone, str) and len(phone) > 4:
        event_dict["phone_number"] = f"***{phone[-4:]}"
    return event_dict


def configure_logging(json_format: bool = True, log_level: str = "INFO") -> None:
    """
    Configure structlog for the application.

    Uses stdlib integration so Django, botocore and httpx records go through
    the same renderer.

    Args:
        json_format: If True, output JSON (production). If False, pretty console output (development).
        log_level: Minimum log level to output.
    """
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _rename_correlation_id,
        _convert_duration_to_nanoseconds,
        _mask_phone_numbers,
    ]

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
        pre_chain.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level_int)

    # botocore is chatty at INFO (credential discovery on every client)
    logging.getLogger("botocore").setLevel(max(log_level_int, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        A bound structlog logger with context support.
    """
    return structlog.get_logger(name)


def bind_contextvars(**kwargs: Any) -> None:
    """
    Bind key-value pairs to the current context.

    Values are included in all subsequent log messages within the current
    request/task context. Use dict unpacking for dotted keys:

        bind_contextvars(**{"connector.id": str(connector.id)})
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_contextvars() -> None:
    """
    Clear all bound context variables.

    Called at the end of request processing to prevent context leaking
    between requests served by the same worker.
    """
    structlog.contextvars.clear_contextvars()
