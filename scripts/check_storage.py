import asyncio
import sys
import os

# Ensure src is in python path
sys.path.append(os.getcwd())

from src.config.storage import get_bucket_name
from src.repositories.storage_repo import StorageRepository


async def check_storage_connectivity() -> bool:
    repo = StorageRepository()
    bucket = get_bucket_name()

    print("--- Checking Storage Connectivity ---")
    print(f"   Endpoint: {repo._get_client().meta.endpoint_url}")
    print(f"   Bucket: {bucket}")

    if await repo.check_connectivity():
        print("✅ Bucket reachable")
        return True
    print("❌ Bucket not reachable, check credentials and S3_BUCKET_NAME")
    return False


if __name__ == "__main__":
    sys.exit(0 if asyncio.run(check_storage_connectivity()) else 1)
