"""
Rendering helpers shared by destination handlers.
"""

from .constants import EMPTY_VALUE_PLACEHOLDER
from .schemas import Scalar


def field_label(name: str) -> str:
    """Field name with its first character upper-cased (``email`` -> ``Email``)."""
    return name[:1].upper() + name[1:]


def display_value(value: Scalar) -> str:
    """Human-facing value; missing and blank values show a placeholder."""
    if value is None or value == "":
        return EMPTY_VALUE_PLACEHOLDER
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def cell_value(value: Scalar) -> str | int | float:
    """Spreadsheet cell value; missing values become an empty cell."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return value


def escape_mrkdwn(text: str) -> str:
    """Escape the control characters Slack mrkdwn treats specially."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
