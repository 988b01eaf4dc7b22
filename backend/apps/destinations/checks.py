"""
Backend configuration checks for destination types.

Missing backend settings never break startup. They surface as a Django
system-check warning and, at dispatch time, as a visible failure on the
affected destination.
"""

from django.conf import settings
from django.core.checks import Warning, register

from .constants import DestinationType

REQUIRED_SETTINGS: dict[str, tuple[str, ...]] = {
    DestinationType.EMAIL: ("AWS_SES_REGION",),
    DestinationType.SHEETS: ("GOOGLE_SERVICE_ACCOUNT_JSON",),
    DestinationType.SMS: ("AWS_SMS_REGION", "AWS_SMS_ORIGINATION_IDENTITY"),
}


def missing_settings(destination_type: str) -> list[str]:
    """Names of required settings that are unset or blank for a destination type."""
    return [
        name
        for name in REQUIRED_SETTINGS.get(destination_type, ())
        if not str(getattr(settings, name, "") or "").strip()
    ]


@register()
def check_destination_backends(app_configs, **kwargs) -> list[Warning]:
    warnings = []
    for number, destination_type in enumerate(REQUIRED_SETTINGS, start=1):
        missing = missing_settings(destination_type)
        if missing:
            warnings.append(
                Warning(
                    f"{destination_type} destinations will fail: missing {', '.join(missing)}",
                    hint="Set the missing values in the environment or .env file.",
                    id=f"destinations.W{number:03d}",
                )
            )
    return warnings
