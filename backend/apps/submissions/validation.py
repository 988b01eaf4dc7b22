"""
Public submission payload validation.

Checks run in a fixed order and stop at the first failure:

1. The payload is a JSON object.
2. Serialized size is at most 100 KiB (UTF-8 bytes of compact JSON).
3. At most 50 fields.
4. Each field name is a non-empty string of at most 255 characters.
5. Each value is null, a string, a number or a boolean.
6. Strings are at most 10,000 characters.
7. Numbers are finite and within the IEEE-754 safe-integer range.

``validate_submission`` never mutates its input and always returns the
same verdict for the same payload.
"""

import json
import math
from typing import Any

from .exceptions import SubmissionValidationError

MAX_PAYLOAD_BYTES = 100 * 1024
MAX_FIELDS = 50
MAX_FIELD_NAME_LENGTH = 255
MAX_STRING_LENGTH = 10_000
MAX_SAFE_INTEGER = 2**53 - 1
MIN_SAFE_INTEGER = -MAX_SAFE_INTEGER


def payload_size(payload: dict[str, Any]) -> int:
    """Size in bytes of the compact JSON encoding."""
    return len(json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))


def _type_name(value: Any) -> str:
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list | tuple):
        return "array"
    return type(value).__name__


def _validate_value(name: str, value: Any) -> None:
    if value is None:
        return

    # bool is an int subclass; accept it before the numeric checks
    if isinstance(value, bool):
        return

    if isinstance(value, str):
        if len(value) > MAX_STRING_LENGTH:
            raise SubmissionValidationError(
                f'Field "{name}" exceeds maximum length: '
                f"{len(value)} > {MAX_STRING_LENGTH} characters",
                field=name,
            )
        return

    if isinstance(value, int | float):
        if isinstance(value, float) and not math.isfinite(value):
            raise SubmissionValidationError(f'Field "{name}" must be a finite number', field=name)
        if value > MAX_SAFE_INTEGER or value < MIN_SAFE_INTEGER:
            raise SubmissionValidationError(
                f'Field "{name}" number value out of safe range: {value}', field=name
            )
        return

    raise SubmissionValidationError(
        f'Invalid field type for "{name}": expected string, number, or boolean, '
        f"got {_type_name(value)}",
        field=name,
    )


def validate_submission(payload: Any) -> dict[str, Any]:
    """
    Validate a decoded submission body.

    Returns:
        The payload, unchanged.

    Raises:
        SubmissionValidationError: Naming the offending field where there is one.
    """
    if not isinstance(payload, dict):
        raise SubmissionValidationError("Form data must be a valid object")

    try:
        size = payload_size(payload)
    except (TypeError, ValueError) as e:
        raise SubmissionValidationError("Form data must be JSON-serializable") from e
    if size > MAX_PAYLOAD_BYTES:
        raise SubmissionValidationError(
            f"Payload size exceeds limit: {size / 1024:.2f}KB > {MAX_PAYLOAD_BYTES / 1024:.2f}KB"
        )

    if len(payload) > MAX_FIELDS:
        raise SubmissionValidationError(f"Field count exceeds limit: {len(payload)} > {MAX_FIELDS}")

    for name, value in payload.items():
        if not isinstance(name, str) or not name:
            raise SubmissionValidationError(
                "Invalid field name: field names must be non-empty strings"
            )
        if len(name) > MAX_FIELD_NAME_LENGTH:
            raise SubmissionValidationError(
                f'Field name too long: "{name[:50]}..." exceeds {MAX_FIELD_NAME_LENGTH} characters',
                field=name,
            )
        _validate_value(name, value)

    return payload
