"""
Authorization dependencies for FastAPI routes
"""
import secrets
from typing import Optional
from fastapi import Depends
from fastapi.security import APIKeyHeader
import structlog

from jobboard.core.config import settings
from jobboard.core.exceptions import AuthenticationError

logger = structlog.get_logger()

api_key_header = APIKeyHeader(name="Authorization", auto_error=False)


def require_api_key(api_key: Optional[str] = Depends(api_key_header)) -> None:
    """
    Guard for write routes.

    The shared secret is sent verbatim in the Authorization header. When
    API_KEY is not configured every caller is allowed.
    """
    expected = settings.API_KEY
    if not expected:
        return

    if not api_key or not secrets.compare_digest(api_key.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("invalid_api_key", provided=bool(api_key))
        raise AuthenticationError("Invalid or missing API key")
