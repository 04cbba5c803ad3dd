"""Storage client configuration for S3-compatible backends."""

import threading
from typing import Optional

import boto3
from botocore.client import BaseClient
from botocore.config import Config
from .settings import settings

_client: Optional[BaseClient] = None
_client_lock = threading.Lock()


def create_storage_client() -> BaseClient:
    """Build a boto3 S3 client from settings."""
    return boto3.client(
        "s3",
        aws_access_key_id=settings.aws_access_key_id or None,
        aws_secret_access_key=settings.aws_secret_access_key or None,
        region_name=settings.aws_region,
        endpoint_url=settings.s3_endpoint_url,
        config=Config(
            signature_version="s3v4",
            retries={"max_attempts": 3, "mode": "standard"},
        ),
    )


def get_storage_client() -> BaseClient:
    """
    Get the process-wide storage client.
    boto3 clients are thread-safe, so one instance is shared by every request.
    """
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = create_storage_client()
    return _client


def reset_storage_client() -> None:
    """Drop the cached client so the next call builds a fresh one."""
    global _client
    with _client_lock:
        _client = None


def get_bucket_name() -> str:
    """Get the configured bucket name."""
    return settings.s3_bucket_name


def get_public_url(key: str, bucket: Optional[str] = None) -> str:
    """Public URL of an object in the bucket."""
    bucket = bucket or get_bucket_name()
    if settings.s3_endpoint_url:
        return f"{settings.s3_endpoint_url.rstrip('/')}/{bucket}/{key}"
    return f"https://s3.{settings.aws_region}.amazonaws.com/{bucket}/{key}"
