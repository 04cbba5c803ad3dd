"""Unit tests for helpers."""

import pytest
from src.config.storage import get_public_url
from src.utils.helpers import (
    format_file_size,
    get_file_extension,
    get_file_name_with_file_type,
    sanitize_filename,
)


@pytest.mark.parametrize(
    "file_name,file_type,expected",
    [
        ("track", "audio/mpeg", "track.mpeg"),
        ("photo", "image/jpeg", "photo.jpeg"),
        ("report", "application/pdf", "report.pdf"),
        ("clip", "video/mp4", "clip.mp4"),
    ],
)
def test_get_file_name_with_file_type(file_name, file_type, expected):
    """Test the extension comes from the MIME subtype."""
    assert get_file_name_with_file_type(file_name, file_type) == expected


def test_get_file_extension_ignores_parameters():
    """Test MIME parameters are not part of the extension."""
    assert get_file_extension("text/plain; charset=utf-8") == "plain"


def test_sanitize_filename_strips_path():
    """Test path components cannot escape into the key."""
    assert sanitize_filename("../../etc/passwd") == "passwd"


def test_sanitize_filename_replaces_unsafe_characters():
    """Test spaces and symbols become underscores."""
    assert sanitize_filename("my photo (1)") == "my_photo__1_"


def test_get_public_url_default_endpoint():
    """Test the regional S3 URL is used without a custom endpoint."""
    assert get_public_url("track.mpeg") == (
        "https://s3.us-east-1.amazonaws.com/test-bucket/track.mpeg"
    )


def test_format_file_size():
    """Test human readable sizes."""
    assert format_file_size(100 * 1024 * 1024) == "100.00 MB"
