"""Redis implementation of the verification cache."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from redis.exceptions import RedisError

from ..exceptions import OtpCacheError
from ..ports import IAtomicConsumeCapability, ICacheService

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger("cqrs_ddd.otp.redis_cache")

# Delete KEYS[1] only if it holds ARGV[1]; returns the number of deleted keys.
CONSUME_SCRIPT = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
end
return 0
"""


class RedisCacheService(ICacheService, IAtomicConsumeCapability):
    """
    Redis implementation of ICacheService.
    Values are JSON serialized; consume() is a single Lua script so two
    concurrent verifications of the same code cannot both succeed.
    Redis failures are logged and re-raised as OtpCacheError.
    """

    def __init__(self, redis_client: Redis[bytes]) -> None:
        self._redis = redis_client

    async def get(self, key: str) -> Any | None:
        try:
            val = await self._redis.get(key)
        except RedisError as e:
            logger.warning("Redis get failed for key %s: %s", key, e)
            raise OtpCacheError(f"Redis get failed for key {key}") from e

        if not val:
            return None
        return json.loads(val)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        val = json.dumps(value, default=str)
        try:
            if ttl:
                await self._redis.setex(key, ttl, val)
            else:
                await self._redis.set(key, val)
        except RedisError as e:
            logger.warning("Redis set failed for key %s: %s", key, e)
            raise OtpCacheError(f"Redis set failed for key {key}") from e

    async def invalidate(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as e:
            logger.warning("Redis delete failed for key %s: %s", key, e)
            raise OtpCacheError(f"Redis delete failed for key {key}") from e

    async def consume(self, key: str, expected: Any) -> bool:
        val = json.dumps(expected, default=str)
        try:
            deleted = await self._redis.eval(CONSUME_SCRIPT, 1, key, val)
        except RedisError as e:
            logger.warning("Redis consume failed for key %s: %s", key, e)
            raise OtpCacheError(f"Redis consume failed for key {key}") from e
        return bool(deleted)


__all__: list[str] = ["RedisCacheService", "CONSUME_SCRIPT"]
