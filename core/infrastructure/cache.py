"""
Cache abstraction (port).

Look-aside cache for slow external lookups such as IP geolocation.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional


class CachePort(ABC):
    """Key/value cache with per-entry expiry. Values must be picklable."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Cached value for ``key``, or None on a miss."""

    @abstractmethod
    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        """
        Store ``value`` under ``key``.

        Args:
            key: Cache key
            value: Value to cache
            timeout: Seconds until expiry (None keeps the backend default)
        """
