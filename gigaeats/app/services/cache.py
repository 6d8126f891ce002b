"""
Redis cache service.

One instance wraps the Redis client the app factory creates at startup;
the client is never stored at module or class level.
"""
import json
from typing import Any, Optional

from redis.asyncio import Redis


class CacheService:
    """Service for caching operations using Redis."""

    TTL_DEFAULT = 300  # 5 minutes

    def __init__(self, redis: Redis):
        self.redis = redis

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        data = await self.redis.get(key)
        if data:
            return json.loads(data)
        return None

    async def set(self, key: str, value: Any, ttl: int = TTL_DEFAULT):
        """Set value in cache with TTL."""
        await self.redis.set(key, json.dumps(value, ensure_ascii=False), ex=ttl)

    async def delete(self, key: str):
        """Delete value from cache."""
        await self.redis.delete(key)
