"""
URL configuration for the backend.
"""

from django.contrib import admin
from django.urls import path

from apps.submissions.views import submit

from .api import api

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/", api.urls),
    # Public ingestion - outside Django Ninja for raw request handling and CORS.
    # No trailing-slash redirect: a redirected POST loses its body.
    path("submit/<str:connector_id>", submit, name="submit"),
    path("submit/<str:connector_id>/", submit),
    # Issued connector URLs have this form
    path("api/submit/<str:connector_id>", submit, name="submit-connector-url"),
    path("api/submit/<str:connector_id>/", submit),
]
