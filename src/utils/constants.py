"""Application constants and enums."""

from enum import Enum

# S3 multipart limits
MAX_MULTIPART_PARTS = 10000


class UploadPhase(str, Enum):
    """Phase of a multipart upload as seen by the orchestrator."""

    IDLE = "idle"
    INITIATED = "initiated"
    COMPLETED = "completed"
    ABORTED = "aborted"
