"""Upload input validators."""

from ..config import settings
from ..core.exceptions import UploadRejectedError, ValidationError
from .helpers import format_file_size


def validate_file_type(content_type: str) -> str:
    """
    Validate a MIME type against the configured allow-list.
    Raises UploadRejectedError if the type is not allowed.
    """
    if content_type not in settings.allowed_file_types:
        raise UploadRejectedError(
            f"File type {content_type} is not allowed. "
            f"Allowed types: {', '.join(settings.allowed_file_types)}"
        )
    return content_type


def validate_file_size(content_length: int) -> int:
    """
    Validate a declared upload size against the configured maximum.
    Raises UploadRejectedError if the size is negative or too large.
    """
    if content_length < 0:
        raise UploadRejectedError("File size cannot be negative")
    if content_length > settings.max_file_size_bytes:
        raise UploadRejectedError(
            f"File size exceeds maximum allowed size of "
            f"{format_file_size(settings.max_file_size_bytes)}"
        )
    return content_length


def validate_part_numbers(part_numbers: list[int], max_parts: int) -> list[int]:
    """Part numbers must be unique and within [1, max_parts]."""
    if not part_numbers:
        raise ValidationError("At least one part is required")
    seen = set()
    for number in part_numbers:
        if number < 1 or number > max_parts:
            raise ValidationError(f"Part number {number} is out of range 1..{max_parts}")
        if number in seen:
            raise ValidationError(f"Duplicate part number {number}")
        seen.add(number)
    return part_numbers
