"""Helper functions for common operations."""

import os


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe storage."""
    # Remove path components and dangerous characters
    filename = os.path.basename(filename.strip())
    filename = "".join(c if c.isalnum() or c in "._-" else "_" for c in filename)
    return filename[:255]


def get_file_extension(content_type: str) -> str:
    """
    Extension implied by a MIME type: the subtype.
    "image/jpeg" -> "jpeg", "audio/mpeg" -> "mpeg".
    """
    return content_type.split(";")[0].strip().split("/")[-1]


def get_file_name_with_file_type(file_name: str, file_type: str) -> str:
    """
    Build the storage key for an upload from the client's base name and MIME type.
    For example ("track", "audio/mpeg") -> "track.mpeg".
    """
    return f"{sanitize_filename(file_name)}.{get_file_extension(file_type)}"


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024.0:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.2f} PB"
