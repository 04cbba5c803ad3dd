"""Unit tests for the storage repository against mocked S3."""

from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError

from src.config import settings
from src.core.exceptions import BackendError, NotFoundError, TransientError, ValidationError
from src.repositories.storage_repo import CompletedPart, StorageRepository

BUCKET = "test-bucket"


def client_error(code: str, operation: str = "Operation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def offline_client():
    """Client double that records calls; no request reaches a backend."""
    return MagicMock()


class TestPresignPut:
    async def test_returns_signed_url(self, storage_repo):
        url = await storage_repo.presign_put("photo.jpeg", "image/jpeg", 2048)

        parsed = urlparse(url)
        query = parse_qs(parsed.query)
        assert parsed.path.endswith(f"/{BUCKET}/photo.jpeg") or parsed.path == "/photo.jpeg"
        assert query["X-Amz-Expires"] == [str(settings.presigned_put_expiration)]

    async def test_disallowed_type_makes_no_call(self, offline_client):
        repo = StorageRepository(client=offline_client, bucket_name=BUCKET)

        with pytest.raises(ValidationError):
            await repo.presign_put("tool.exe", "application/x-msdownload", 10)

        offline_client.generate_presigned_url.assert_not_called()

    async def test_oversized_file_makes_no_call(self, offline_client):
        repo = StorageRepository(client=offline_client, bucket_name=BUCKET)

        with pytest.raises(ValidationError):
            await repo.presign_put("big.jpeg", "image/jpeg", settings.max_file_size_bytes + 1)

        offline_client.generate_presigned_url.assert_not_called()

    async def test_signing_failure(self, offline_client):
        offline_client.generate_presigned_url.side_effect = NoCredentialsError()
        repo = StorageRepository(client=offline_client, bucket_name=BUCKET)

        with pytest.raises(BackendError):
            await repo.presign_put("photo.jpeg", "image/jpeg", 2048)


class TestPresignGet:
    async def test_existing_object(self, storage_repo, s3):
        s3.put_object(Bucket=BUCKET, Key="doc.pdf", Body=b"%PDF")

        url = await storage_repo.presign_get("doc.pdf")

        assert "doc.pdf" in url
        assert "X-Amz-Signature" in url

    async def test_missing_object(self, storage_repo):
        with pytest.raises(NotFoundError):
            await storage_repo.presign_get("missing.pdf")


class TestObjects:
    async def test_object_exists(self, storage_repo, s3):
        s3.put_object(Bucket=BUCKET, Key="a.png", Body=b"png")

        assert await storage_repo.object_exists("a.png") is True
        assert await storage_repo.object_exists("b.png") is False

    async def test_delete_object(self, storage_repo, s3):
        s3.put_object(Bucket=BUCKET, Key="a.png", Body=b"png")

        await storage_repo.delete_object("a.png")

        assert await storage_repo.object_exists("a.png") is False

    async def test_delete_missing_object_is_success(self, storage_repo):
        await storage_repo.delete_object("never-uploaded.png")

    async def test_delete_backend_rejection(self, offline_client):
        offline_client.delete_object.side_effect = client_error("AccessDenied", "DeleteObject")
        repo = StorageRepository(client=offline_client, bucket_name=BUCKET)

        with pytest.raises(BackendError):
            await repo.delete_object("a.png")

    async def test_check_connectivity(self, storage_repo):
        assert await storage_repo.check_connectivity() is True
        assert await storage_repo.check_connectivity(bucket="no-such-bucket") is False


class TestMultipart:
    async def test_initiate(self, storage_repo):
        upload = await storage_repo.initiate_multipart("track.mpeg", "audio/mpeg")

        assert upload.key == "track.mpeg"
        assert upload.upload_id

    async def test_initiate_disallowed_type_makes_no_call(self, offline_client):
        repo = StorageRepository(client=offline_client, bucket_name=BUCKET)

        with pytest.raises(ValidationError):
            await repo.initiate_multipart("page.html", "text/html")

        offline_client.create_multipart_upload.assert_not_called()

    async def test_presign_part_urls_cover_every_part(self, storage_repo):
        upload = await storage_repo.initiate_multipart("track.mpeg", "audio/mpeg")

        urls = await storage_repo.presign_part_urls("track.mpeg", upload.upload_id, 5)

        assert [u.part_number for u in urls] == [1, 2, 3, 4, 5]
        assert len({u.signed_url for u in urls}) == 5
        for u in urls:
            query = parse_qs(urlparse(u.signed_url).query)
            assert query["partNumber"] == [str(u.part_number)]
            assert query["uploadId"] == [upload.upload_id]
            assert query["X-Amz-Expires"] == [str(settings.presigned_part_expiration)]

    async def test_presign_part_urls_fails_whole_batch(self, offline_client):
        def presign(client_method, Params, ExpiresIn):
            if Params["PartNumber"] == 2:
                raise client_error("InternalError")
            return f"https://example.test/part-{Params['PartNumber']}"

        offline_client.generate_presigned_url.side_effect = presign
        repo = StorageRepository(client=offline_client, bucket_name=BUCKET)

        with pytest.raises(BackendError):
            await repo.presign_part_urls("track.mpeg", "upload-1", 3)

    async def test_complete(self, storage_repo, s3, five_mib_part):
        upload = await storage_repo.initiate_multipart("track.mpeg", "audio/mpeg")
        etags = [
            s3.upload_part(
                Bucket=BUCKET,
                Key="track.mpeg",
                UploadId=upload.upload_id,
                PartNumber=number,
                Body=body,
            )["ETag"]
            for number, body in [(1, five_mib_part), (2, b"tail")]
        ]

        # Out of order on purpose; storage needs ascending part numbers
        result = await storage_repo.complete_multipart(
            "track.mpeg",
            upload.upload_id,
            [CompletedPart(2, etags[1]), CompletedPart(1, etags[0])],
        )

        assert result.key == "track.mpeg"
        body = s3.get_object(Bucket=BUCKET, Key="track.mpeg")["Body"].read()
        assert body == five_mib_part + b"tail"

    async def test_complete_with_wrong_etag(self, storage_repo, s3):
        upload = await storage_repo.initiate_multipart("track.mpeg", "audio/mpeg")
        s3.upload_part(
            Bucket=BUCKET, Key="track.mpeg", UploadId=upload.upload_id, PartNumber=1, Body=b"x"
        )

        with pytest.raises(BackendError):
            await storage_repo.complete_multipart(
                "track.mpeg", upload.upload_id, [CompletedPart(1, '"e1"')]
            )

    async def test_complete_transient_failure(self, offline_client):
        offline_client.complete_multipart_upload.side_effect = EndpointConnectionError(
            endpoint_url="https://s3.us-east-1.amazonaws.com"
        )
        repo = StorageRepository(client=offline_client, bucket_name=BUCKET)

        with pytest.raises(TransientError):
            await repo.complete_multipart("track.mpeg", "upload-1", [CompletedPart(1, '"e1"')])

    async def test_abort(self, storage_repo, s3):
        upload = await storage_repo.initiate_multipart("track.mpeg", "audio/mpeg")

        await storage_repo.abort_multipart("track.mpeg", upload.upload_id)

        uploads = s3.list_multipart_uploads(Bucket=BUCKET).get("Uploads", [])
        assert upload.upload_id not in [u["UploadId"] for u in uploads]

    async def test_abort_unknown_upload_is_success(self, offline_client):
        offline_client.abort_multipart_upload.side_effect = client_error(
            "NoSuchUpload", "AbortMultipartUpload"
        )
        repo = StorageRepository(client=offline_client, bucket_name=BUCKET)

        await repo.abort_multipart("track.mpeg", "gone")
