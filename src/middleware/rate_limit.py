"""Rate limiting middleware using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from ..config import settings


def presign_rate_limit() -> str:
    """Limit for the endpoints that hand out presigned URLs, read per request."""
    return f"{settings.rate_limit_per_minute}/minute"


limiter = Limiter(key_func=get_remote_address)
