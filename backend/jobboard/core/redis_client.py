"""
Redis client for caching board previews
"""
import redis
from typing import Optional, Any
import json
import structlog
from jobboard.core.config import settings

logger = structlog.get_logger()

# Connections are opened lazily on first command
redis_client = redis.from_url(
    settings.REDIS_URL,
    encoding="utf-8",
    decode_responses=True,
    socket_connect_timeout=2,
    socket_timeout=2,
    retry_on_timeout=False,
    health_check_interval=30,
)


def get_cache(key: str) -> Optional[Any]:
    """Get value from cache"""
    try:
        value = redis_client.get(key)
        if value:
            return json.loads(value)
        return None
    except Exception as e:
        logger.warning("cache_get_error", key=key, error=str(e))
        return None


def set_cache(key: str, value: Any, ttl: Optional[int] = None) -> bool:
    """Set value in cache with optional TTL"""
    try:
        ttl = ttl or settings.PREVIEW_CACHE_TTL
        serialized = json.dumps(value, default=str)
        return bool(redis_client.setex(key, ttl, serialized))
    except Exception as e:
        logger.warning("cache_set_error", key=key, error=str(e))
        return False


def get_cache_key(prefix: str, *args) -> str:
    """Generate cache key from prefix and arguments"""
    return f"{prefix}:{':'.join(str(arg) for arg in args)}"
