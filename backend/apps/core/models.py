"""
Core models - shared base classes and utilities.
"""

import uuid

from django.db import models


class TimestampedModel(models.Model):
    """
    Abstract base model with created_at/updated_at timestamps.

    All business entities should inherit from this or PublicIdModel.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class PublicIdModel(TimestampedModel):
    """
    Abstract base model keyed by a random UUID.

    Used for entities whose identifier appears in public URLs or API
    responses. The id is issued once on creation and never changes.

    Usage:
        class Connector(PublicIdModel):
            name = models.CharField(max_length=255)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True
