"""Pytest configuration and fixtures."""

import os

# Settings are read at import time, so the environment must be in place first
os.environ.update(
    {
        "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_SECURITY_TOKEN": "testing",
        "AWS_SESSION_TOKEN": "testing",
        "AWS_DEFAULT_REGION": "us-east-1",
        "AWS_REGION": "us-east-1",
        "S3_BUCKET_NAME": "test-bucket",
        "MAX_FILE_SIZE_MB": "100",
        "RATE_LIMIT_PER_MINUTE": "10000",
    }
)
os.environ.pop("S3_ENDPOINT_URL", None)

import pytest
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from moto import mock_aws
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from src.main import app
from src.config.database import Base, get_db
from src.config.storage import get_storage_client, reset_storage_client
from src.models.file import File  # noqa: F401
from src.repositories.storage_repo import StorageRepository

BUCKET = "test-bucket"

# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create test database session on a fresh in-memory database."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def s3():
    """
    Mock S3 with the test bucket created.
    Yields the shared storage client, built inside the mock.
    """
    with mock_aws():
        reset_storage_client()
        client = get_storage_client()
        client.create_bucket(Bucket=BUCKET)
        yield client
        reset_storage_client()


@pytest.fixture
def storage_repo(s3) -> StorageRepository:
    """Storage repository bound to the mocked bucket."""
    return StorageRepository(client=s3, bucket_name=BUCKET)


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession, s3) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def file_upload_data():
    """Upload description as sent by clients."""
    return {"fileName": "photo.jpeg", "fileSize": 2048, "fileType": "image/jpeg"}


@pytest.fixture
def five_mib_part() -> bytes:
    """Smallest body S3 accepts for a non-final part."""
    return b"a" * (5 * 1024 * 1024)
