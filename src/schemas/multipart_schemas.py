"""Multipart upload schemas."""

from typing import List
from pydantic import Field
from .shared import CamelModel
from ..utils.constants import MAX_MULTIPART_PARTS


class InitiateMultipartUploadRequest(CamelModel):
    """Request to initiate multipart upload."""

    file_name: str = Field(..., min_length=1, max_length=255, description="Base name of the file")
    file_type: str = Field(..., min_length=3, description="MIME type of the file")


class InitiateMultipartUploadResponse(CamelModel):
    """Response from initiating multipart upload."""

    upload_id: str = Field(..., description="Multipart upload ID issued by storage")
    key: str = Field(..., description="Storage key of the final object")
    file_name: str


class PresignedPartUrlsRequest(CamelModel):
    """Request for presigned part URLs."""

    upload_id: str
    key: str
    parts_count: int = Field(..., ge=1, le=MAX_MULTIPART_PARTS)


class PartUrlInfo(CamelModel):
    """Presigned URL for a single part in multipart upload."""

    part_number: int = Field(..., description="Part number (1-indexed)")
    signed_url: str = Field(..., description="Presigned URL for uploading this part")


class PresignedPartUrlsResponse(CamelModel):
    """Presigned URLs for every requested part."""

    urls: List[PartUrlInfo]


class MultipartPartComplete(CamelModel):
    """Information about an uploaded part."""

    part_number: int = Field(..., alias="PartNumber", description="Part number (1-indexed)")
    etag: str = Field(..., alias="ETag", description="ETag returned by storage for this part")


class CompleteMultipartUploadRequest(CamelModel):
    """Request to complete multipart upload."""

    upload_id: str
    key: str
    parts: List[MultipartPartComplete] = Field(..., description="Uploaded parts with ETags")


class AbortMultipartUploadRequest(CamelModel):
    """Request to abort multipart upload."""

    upload_id: str
    key: str
