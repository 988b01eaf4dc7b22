"""
Destination handlers, one per destination type.
"""

from ..registry import HandlerRegistry
from .email import EmailHandler
from .sheets import SheetsHandler
from .slack import SlackHandler
from .sms import SmsHandler
from .webhook import WebhookHandler


def build_default_registry() -> HandlerRegistry:
    """Registry with a handler for every supported destination type."""
    return HandlerRegistry(
        [
            EmailHandler(),
            SlackHandler(),
            SheetsHandler(),
            SmsHandler(),
            WebhookHandler(),
        ]
    )


__all__ = [
    "EmailHandler",
    "SheetsHandler",
    "SlackHandler",
    "SmsHandler",
    "WebhookHandler",
    "build_default_registry",
]
