"""
Test settings.

SQLite and in-process caches so the suite runs without external services.
"""

from .base import *  # noqa: F403

DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

PUBLIC_BASE_URL = "https://forms.example.com"

# No network access from tests
DESTINATION_URL_RESOLVE_DNS = False
DISPATCH_BACKOFF_BASE_SECONDS = 0.0
AWS_SMS_ORIGINATION_IDENTITY = "+15550000000"
GOOGLE_SERVICE_ACCOUNT_JSON = ""
