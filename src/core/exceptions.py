"""Error taxonomy shared by the storage gateway, services and routers."""

from fastapi import status


class FileServiceError(Exception):
    """Base class for errors that map onto an HTTP error response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "internal_error"
    default_message: str = "Something went wrong!"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FileServiceError):
    """Caller input rejected before any remote call was made."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "validation_error"
    default_message = "Invalid request"


class UploadRejectedError(ValidationError):
    """Upload refused by the storage gateway checks (type or size)."""

    status_code = status.HTTP_424_FAILED_DEPENDENCY


class NotFoundError(FileServiceError):
    """Referenced record or object does not exist."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "not_found"
    default_message = "File not found!"


class BackendError(FileServiceError):
    """Storage backend or database rejected the operation."""

    status_code = status.HTTP_424_FAILED_DEPENDENCY
    error_code = "backend_error"
    default_message = "Storage backend rejected the request"


class TransientError(FileServiceError):
    """Network-level failure; the same request is safe to retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "transient_error"
    default_message = "Storage backend temporarily unavailable"


class InternalError(FileServiceError):
    """Unexpected failure."""
