"""
Redis-backed song list cache.

Song listings are cached by other parts of the application under a shared
namespace (``songs:*`` by default). Anything that changes the set of songs
calls ``clear_songs_cache`` afterwards.
"""

import logging
import os
from typing import Optional

import redis
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
SONGS_CACHE_PREFIX = os.getenv("SONGS_CACHE_PREFIX", "songs")


class CacheService:
    def __init__(self, client: redis.Redis, prefix: str = SONGS_CACHE_PREFIX):
        self.client = client
        self.prefix = prefix

    def songs_key(self, *parts: str) -> str:
        """Build a key in the song list namespace, e.g. songs_key("list", "2024-S1")."""
        return ":".join([self.prefix, *[str(p) for p in parts]])

    def clear_songs_cache(self) -> int:
        """
        Delete every cached song listing.

        Returns the number of keys removed. Redis failures are logged and
        reported as 0 so callers never fail because the cache is unavailable.
        """
        pattern = f"{self.prefix}:*"
        removed = 0
        try:
            cursor = 0
            while True:
                cursor, keys = self.client.scan(cursor, match=pattern, count=100)
                if keys:
                    removed += self.client.delete(*keys)
                if cursor == 0:
                    break
        except redis.RedisError as e:
            logger.error(f"Failed to clear song cache (pattern={pattern}): {e}")
            return 0

        logger.info(f"Song cache cleared: {removed} key(s) under {pattern}")
        return removed


_cache_service: Optional[CacheService] = None


def get_cache_service() -> CacheService:
    """Get the shared cache service (FastAPI dependency)."""
    global _cache_service
    if _cache_service is None:
        client = redis.Redis.from_url(
            REDIS_URL,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        _cache_service = CacheService(client)
    return _cache_service
