"""
ASGI config for the backend.

Preferred entrypoint: the public ingestion view is async.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

application = get_asgi_application()
