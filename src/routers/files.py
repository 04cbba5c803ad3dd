"""File upload and management routes."""

from typing import Optional
from fastapi import APIRouter, Body, Depends, Request
from ..core.dependencies import get_file_service, get_upload_service
from ..middleware.rate_limit import presign_rate_limit, limiter
from ..repositories.storage_repo import CompletedPart
from ..schemas.file import (
    AddFileResponse,
    DeleteFileRequest,
    FileDownloadResponse,
    FileListResponse,
    FileResponse,
    FileUpload,
    PutUrlResponse,
)
from ..schemas.multipart_schemas import (
    AbortMultipartUploadRequest,
    CompleteMultipartUploadRequest,
    InitiateMultipartUploadRequest,
    InitiateMultipartUploadResponse,
    PartUrlInfo,
    PresignedPartUrlsRequest,
    PresignedPartUrlsResponse,
)
from ..schemas.shared import MessageResponse
from ..services.file_service import FileService
from ..services.upload_service import MultipartUploadService

router = APIRouter(prefix="/api/v1/file", tags=["files"])


@router.post("/put-url", response_model=PutUrlResponse)
@limiter.limit(presign_rate_limit)
async def get_put_url(
    request: Request,
    payload: FileUpload,
    file_service: FileService = Depends(get_file_service),
):
    """Get a presigned URL the client PUTs the file to directly."""
    return await file_service.get_put_url(payload)


@router.post("/add", response_model=AddFileResponse)
async def add_file(
    payload: FileUpload,
    file_service: FileService = Depends(get_file_service),
):
    """Register an uploaded file. fileName is the name returned by put-url."""
    return await file_service.create_file(payload)


@router.get("", response_model=FileListResponse)
async def list_files(file_service: FileService = Depends(get_file_service)):
    """List all files."""
    return await file_service.list_files()


@router.get("/{file_id}", response_model=FileResponse)
async def get_file_details(
    file_id: int,
    file_service: FileService = Depends(get_file_service),
):
    """Get file details by ID."""
    return await file_service.get_file_details(file_id)


@router.get("/{file_id}/download-url", response_model=FileDownloadResponse)
@limiter.limit(presign_rate_limit)
async def get_download_url(
    request: Request,
    file_id: int,
    file_service: FileService = Depends(get_file_service),
):
    """Get presigned download URL for file."""
    return await file_service.get_download_url(file_id)


@router.delete("/{file_id}", response_model=MessageResponse)
async def delete_file(
    file_id: int,
    payload: Optional[DeleteFileRequest] = Body(None),
    file_service: FileService = Depends(get_file_service),
):
    """
    Delete a file from storage, then its record.
    A fileName in the body is ignored; the stored name is authoritative.
    """
    await file_service.delete_file(file_id)
    return MessageResponse(message="File deleted successfully!")


@router.post("/initiate-multipart-upload", response_model=InitiateMultipartUploadResponse)
@limiter.limit(presign_rate_limit)
async def initiate_multipart_upload(
    request: Request,
    payload: InitiateMultipartUploadRequest,
    upload_service: MultipartUploadService = Depends(get_upload_service),
):
    """Start a multipart upload for a large file."""
    upload = await upload_service.initiate(payload.file_name, payload.file_type)
    return InitiateMultipartUploadResponse(
        upload_id=upload.upload_id, key=upload.key, file_name=upload.file_name
    )


@router.post("/presigned-part-urls", response_model=PresignedPartUrlsResponse)
@limiter.limit(presign_rate_limit)
async def get_presigned_part_urls(
    request: Request,
    payload: PresignedPartUrlsRequest,
    upload_service: MultipartUploadService = Depends(get_upload_service),
):
    """Get presigned URLs for parts 1..partsCount of a multipart upload."""
    urls = await upload_service.request_part_urls(
        upload_id=payload.upload_id, key=payload.key, parts_count=payload.parts_count
    )
    return PresignedPartUrlsResponse(
        urls=[PartUrlInfo(part_number=u.part_number, signed_url=u.signed_url) for u in urls]
    )


@router.post("/complete-multipart-upload", response_model=MessageResponse)
async def complete_multipart_upload(
    payload: CompleteMultipartUploadRequest,
    upload_service: MultipartUploadService = Depends(get_upload_service),
):
    """
    Complete a multipart upload once every part is in storage.
    Does not register the file; call add afterwards.
    """
    await upload_service.complete(
        upload_id=payload.upload_id,
        key=payload.key,
        parts=[CompletedPart(part_number=p.part_number, etag=p.etag) for p in payload.parts],
    )
    return MessageResponse(message="File uploaded successfully!")


@router.post("/abort-multipart-upload", response_model=MessageResponse)
async def abort_multipart_upload(
    payload: AbortMultipartUploadRequest,
    upload_service: MultipartUploadService = Depends(get_upload_service),
):
    """Abort a multipart upload and release its uploaded parts."""
    await upload_service.abort(upload_id=payload.upload_id, key=payload.key)
    return MessageResponse(message="Multipart upload aborted successfully")
