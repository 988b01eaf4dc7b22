"""
Exceptions raised while ingesting a public form submission.

Each carries the HTTP status and machine-readable code the ingestion
view responds with.
"""


class IngestionError(Exception):
    """Base exception for ingestion gate and storage failures."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SubmissionValidationError(IngestionError):
    """Payload rejected by the validator."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class ConnectorNotFound(IngestionError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str = "Connector not found"):
        super().__init__(message)


class ConnectorInactive(IngestionError):
    status_code = 403
    code = "CONNECTOR_INACTIVE"

    def __init__(self, message: str = "Connector is not active"):
        super().__init__(message)


class SubmissionStorageError(IngestionError):
    status_code = 500
    code = "STORAGE_ERROR"

    def __init__(self, message: str = "Failed to store submission"):
        super().__init__(message)
