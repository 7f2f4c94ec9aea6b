"""In-memory verification cache for development and testing.

WARNING: This implementation is NOT suitable for production use.
Codes live in a local dictionary and are not shared between workers.

Use RedisCacheService in production.
"""

from __future__ import annotations

import secrets
import time
from typing import TYPE_CHECKING, Any

from ..ports import IAtomicConsumeCapability, ICacheService

if TYPE_CHECKING:
    from collections.abc import Callable


class InMemoryCacheService(ICacheService, IAtomicConsumeCapability):
    """In-memory cache with per-key expiry for TESTING ONLY.

    ⚠️ WARNING: Codes are stored in plain text in memory.
    It will NOT work in multi-worker environments.

    consume() runs without awaiting anything, so it is atomic within
    a single event loop.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._store: dict[str, tuple[Any, float | None]] = {}

    async def get(self, key: str) -> Any | None:
        return self._get_live(key)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        expires_at: float | None = None
        if ttl is not None and ttl > 0:
            expires_at = self._clock() + ttl
        self._store[key] = (value, expires_at)

    async def invalidate(self, key: str) -> None:
        self._store.pop(key, None)

    async def consume(self, key: str, expected: Any) -> bool:
        current = self._get_live(key)
        if current is None or not _values_equal(current, expected):
            return False
        del self._store[key]
        return True

    def _get_live(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._store[key]
            return None

        return value

    def clear_all(self) -> None:
        """Clear all entries. Useful for testing cleanup."""
        self._store.clear()


def _values_equal(current: Any, expected: Any) -> bool:
    if isinstance(current, str) and isinstance(expected, str):
        return secrets.compare_digest(current.encode(), expected.encode())
    return bool(current == expected)


__all__: list[str] = ["InMemoryCacheService"]
