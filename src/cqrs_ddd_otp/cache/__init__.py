"""Verification cache adapters."""

from __future__ import annotations

from .memory import InMemoryCacheService
from .redis_cache import RedisCacheService

__all__: list[str] = [
    "InMemoryCacheService",
    "RedisCacheService",
]
