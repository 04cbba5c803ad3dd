"""Multipart upload orchestration.

A multipart upload runs in three client-driven calls:

1. initiate: storage opens a session and returns an upload ID.
2. request_part_urls: presigned URLs for parts 1..N. The client PUTs each
   part straight to storage and keeps the ETag storage answers with.
3. complete: the collected (part number, ETag) pairs are forwarded so storage
   can assemble the object.

No session state is kept here; storage is the source of truth between calls.
Sessions that are never completed or aborted are left to the bucket's
lifecycle policy.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.exceptions import BackendError, TransientError, ValidationError
from ..repositories.storage_repo import (
    CompletedPart,
    CompletionResult,
    PartUrl,
    StorageRepository,
)
from ..utils.constants import MAX_MULTIPART_PARTS, UploadPhase
from ..utils.helpers import get_file_name_with_file_type
from ..utils.logger import get_logger
from ..utils.validators import validate_part_numbers

logger = get_logger(__name__)


@dataclass(frozen=True)
class InitiatedUpload:
    upload_id: str
    key: str
    file_name: str
    phase: UploadPhase = UploadPhase.INITIATED


@dataclass(frozen=True)
class CompletedUpload:
    result: CompletionResult
    phase: UploadPhase = UploadPhase.COMPLETED


class MultipartUploadService:
    """Service sequencing multipart uploads against the storage backend."""

    def __init__(self, storage_repo: Optional[StorageRepository] = None):
        self.storage_repo = storage_repo or StorageRepository()

    async def initiate(self, file_name: str, file_type: str) -> InitiatedUpload:
        """Open a multipart session for file_name with the extension of file_type."""
        key = get_file_name_with_file_type(file_name, file_type)
        upload = await self.storage_repo.initiate_multipart(key=key, content_type=file_type)
        logger.info("Multipart upload initiated", key=upload.key, upload_id=upload.upload_id)
        return InitiatedUpload(upload_id=upload.upload_id, key=upload.key, file_name=key)

    async def request_part_urls(
        self, upload_id: str, key: str, parts_count: int
    ) -> list[PartUrl]:
        """Fresh presigned URLs for parts 1..parts_count. Safe to call repeatedly."""
        if not 1 <= parts_count <= MAX_MULTIPART_PARTS:
            raise ValidationError(f"partsCount must be between 1 and {MAX_MULTIPART_PARTS}")
        urls = await self.storage_repo.presign_part_urls(
            key=key, upload_id=upload_id, parts_count=parts_count
        )
        logger.info("Part URLs issued", key=key, upload_id=upload_id, parts=parts_count)
        return urls

    async def complete(
        self, upload_id: str, key: str, parts: Sequence[CompletedPart]
    ) -> CompletedUpload:
        """
        Assemble the uploaded parts into the final object.

        TransientError leaves the session open and the call may be repeated with
        the same parts. BackendError (e.g. an ETag storage does not recognise)
        ends the upload; it is not retried here.
        """
        validate_part_numbers([p.part_number for p in parts], MAX_MULTIPART_PARTS)
        try:
            result = await self.storage_repo.complete_multipart(
                key=key, upload_id=upload_id, parts=parts
            )
        except TransientError:
            logger.warning(
                "Multipart completion interrupted",
                key=key,
                upload_id=upload_id,
                phase=UploadPhase.INITIATED.value,
            )
            raise
        except BackendError:
            logger.error(
                "Multipart completion rejected",
                key=key,
                upload_id=upload_id,
                phase=UploadPhase.ABORTED.value,
            )
            raise

        logger.info("Multipart upload completed", key=result.key, upload_id=upload_id, parts=len(parts))
        return CompletedUpload(result=result)

    async def abort(self, upload_id: str, key: str) -> UploadPhase:
        """Abandon the session and release the parts uploaded so far."""
        await self.storage_repo.abort_multipart(key=key, upload_id=upload_id)
        logger.info("Multipart upload aborted", key=key, upload_id=upload_id)
        return UploadPhase.ABORTED
