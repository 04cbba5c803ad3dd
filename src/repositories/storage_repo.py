"""Storage repository: presigned URLs and multipart uploads against S3."""

import asyncio
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Optional, Sequence

from botocore.client import BaseClient
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from ..config import settings
from ..config.storage import get_bucket_name, get_storage_client
from ..core.exceptions import BackendError, NotFoundError, TransientError
from ..utils.logger import get_logger
from ..utils.validators import validate_file_size, validate_file_type

logger = get_logger(__name__)

TRANSIENT_ERRORS = (
    EndpointConnectionError,
    ConnectTimeoutError,
    ReadTimeoutError,
    ConnectionClosedError,
)
NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


@dataclass(frozen=True)
class MultipartUpload:
    """Handle to a multipart upload session held by the storage backend."""

    upload_id: str
    key: str


@dataclass(frozen=True)
class PartUrl:
    """Presigned URL for a single part."""

    part_number: int
    signed_url: str


@dataclass(frozen=True)
class CompletedPart:
    """A part the client uploaded, identified by the ETag storage returned."""

    part_number: int
    etag: str


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of assembling a multipart upload."""

    key: str
    location: Optional[str]
    etag: Optional[str]


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class StorageRepository:
    """Repository for object storage operations."""

    def __init__(self, client: Optional[BaseClient] = None, bucket_name: Optional[str] = None):
        self.client = client
        self.bucket_name = bucket_name

    def _get_client(self) -> BaseClient:
        """Get the shared storage client."""
        if self.client is None:
            self.client = get_storage_client()
        return self.client

    def _get_bucket(self, bucket: Optional[str] = None) -> str:
        if bucket:
            return bucket
        if self.bucket_name is None:
            self.bucket_name = get_bucket_name()
        return self.bucket_name

    async def _call(self, operation: str, func: Callable[..., Any], **kwargs) -> Any:
        """
        Run a blocking boto3 call in the default executor and translate its failures.
        """
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, partial(func, **kwargs))
        except TRANSIENT_ERRORS as e:
            logger.warning("Storage call failed transiently", operation=operation, error=str(e))
            raise TransientError(f"Storage unavailable during {operation}: {e}") from e
        except ClientError as e:
            code = _error_code(e)
            logger.warning("Storage call rejected", operation=operation, error_code=code)
            if code in NOT_FOUND_CODES:
                raise NotFoundError(f"Object not found: {kwargs.get('Key')}") from e
            raise BackendError(f"Failed to {operation}: {e}") from e
        except BotoCoreError as e:
            logger.warning("Storage call failed", operation=operation, error=str(e))
            raise BackendError(f"Failed to {operation}: {e}") from e

    def _presign(self, client_method: str, params: dict, expiration: int) -> str:
        try:
            return self._get_client().generate_presigned_url(
                client_method, Params=params, ExpiresIn=expiration
            )
        except (ClientError, BotoCoreError) as e:
            raise BackendError(f"Failed to generate presigned URL: {e}") from e

    async def presign_put(
        self,
        key: str,
        content_type: str,
        content_length: int,
        bucket: Optional[str] = None,
    ) -> str:
        """
        Generate presigned URL for a direct single-request upload.
        Args:
            key: Storage key for the object
            content_type: MIME type the client will send
            content_length: Size in bytes the client will send
            bucket: Bucket override
        Returns:
            Presigned PUT URL
        Raises:
            ValidationError: type not allowed or size over the limit
        """
        validate_file_type(content_type)
        validate_file_size(content_length)
        url = self._presign(
            "put_object",
            {
                "Bucket": self._get_bucket(bucket),
                "Key": key,
                "ContentType": content_type,
                "ContentLength": content_length,
            },
            settings.presigned_put_expiration,
        )
        logger.info("Presigned put URL issued", key=key, content_type=content_type)
        return url

    async def presign_get(self, key: str, bucket: Optional[str] = None) -> str:
        """Generate presigned download URL. Raises NotFoundError if the key is absent."""
        bucket = self._get_bucket(bucket)
        await self._call("head object", self._get_client().head_object, Bucket=bucket, Key=key)
        return self._presign(
            "get_object",
            {"Bucket": bucket, "Key": key},
            settings.presigned_get_expiration,
        )

    async def object_exists(self, key: str, bucket: Optional[str] = None) -> bool:
        """Check if object exists in storage."""
        try:
            await self._call(
                "head object",
                self._get_client().head_object,
                Bucket=self._get_bucket(bucket),
                Key=key,
            )
        except NotFoundError:
            return False
        return True

    async def delete_object(self, key: str, bucket: Optional[str] = None) -> None:
        """
        Delete object from storage.
        A key that is already gone counts as deleted.
        """
        try:
            await self._call(
                "delete object",
                self._get_client().delete_object,
                Bucket=self._get_bucket(bucket),
                Key=key,
            )
        except NotFoundError:
            logger.info("Object already absent", key=key)
            return
        logger.info("Object deleted", key=key)

    async def check_connectivity(self, bucket: Optional[str] = None) -> bool:
        """Check the bucket is reachable with the configured credentials."""
        try:
            await self._call(
                "head bucket", self._get_client().head_bucket, Bucket=self._get_bucket(bucket)
            )
        except (BackendError, NotFoundError, TransientError) as e:
            logger.error("Storage connectivity check failed", error=str(e))
            return False
        return True

    # Multipart Upload Methods

    async def initiate_multipart(
        self, key: str, content_type: str, bucket: Optional[str] = None
    ) -> MultipartUpload:
        """Initiate multipart upload. Raises ValidationError for disallowed types."""
        validate_file_type(content_type)
        response = await self._call(
            "initiate multipart upload",
            self._get_client().create_multipart_upload,
            Bucket=self._get_bucket(bucket),
            Key=key,
            ContentType=content_type,
        )
        return MultipartUpload(upload_id=response["UploadId"], key=response.get("Key", key))

    async def presign_upload_part(
        self, key: str, upload_id: str, part_number: int, bucket: Optional[str] = None
    ) -> str:
        """Generate presigned URL for uploading one part."""
        return self._presign(
            "upload_part",
            {
                "Bucket": self._get_bucket(bucket),
                "Key": key,
                "UploadId": upload_id,
                "PartNumber": part_number,
            },
            settings.presigned_part_expiration,
        )

    async def presign_part_urls(
        self, key: str, upload_id: str, parts_count: int, bucket: Optional[str] = None
    ) -> list[PartUrl]:
        """
        Generate presigned URLs for parts 1..parts_count.
        Parts are signed concurrently; if any fails the whole batch fails.
        """
        part_numbers = range(1, parts_count + 1)
        urls = await asyncio.gather(
            *(
                self.presign_upload_part(key, upload_id, number, bucket=bucket)
                for number in part_numbers
            )
        )
        return [PartUrl(part_number=n, signed_url=u) for n, u in zip(part_numbers, urls)]

    async def complete_multipart(
        self,
        key: str,
        upload_id: str,
        parts: Sequence[CompletedPart],
        bucket: Optional[str] = None,
    ) -> CompletionResult:
        """Complete multipart upload by combining all parts in part-number order."""
        multipart_upload = {
            "Parts": [
                {"PartNumber": part.part_number, "ETag": part.etag}
                for part in sorted(parts, key=lambda p: p.part_number)
            ]
        }
        response = await self._call(
            "complete multipart upload",
            self._get_client().complete_multipart_upload,
            Bucket=self._get_bucket(bucket),
            Key=key,
            UploadId=upload_id,
            MultipartUpload=multipart_upload,
        )
        return CompletionResult(
            key=response.get("Key", key),
            location=response.get("Location"),
            etag=response.get("ETag"),
        )

    async def abort_multipart(
        self, key: str, upload_id: str, bucket: Optional[str] = None
    ) -> None:
        """Abort multipart upload and release uploaded parts."""
        try:
            await self._call(
                "abort multipart upload",
                self._get_client().abort_multipart_upload,
                Bucket=self._get_bucket(bucket),
                Key=key,
                UploadId=upload_id,
            )
        except BackendError as e:
            cause = e.__cause__
            if isinstance(cause, ClientError) and _error_code(cause) == "NoSuchUpload":
                logger.info("Multipart upload already gone", key=key, upload_id=upload_id)
                return
            raise
