"""
Cache adapter implementations.

Provides the Django cache implementation of CachePort. The configured
backend is Redis outside of tests.
"""

import logging
from typing import Any, Optional

from asgiref.sync import sync_to_async
from django.core.cache import cache

from core.infrastructure.cache import CachePort

logger = logging.getLogger(__name__)


class DjangoCacheAdapter(CachePort):
    """
    Django cache adapter implementing CachePort.

    Cache errors are logged and treated as misses; a cache outage
    degrades lookups but never fails a request.
    """

    async def get(self, key: str) -> Optional[Any]:
        try:
            value = await sync_to_async(cache.get)(key)
            logger.debug("Cache %s: %s", "hit" if value is not None else "miss", key)
            return value
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error getting from cache: %s", e, exc_info=True)
            return None

    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        try:
            await sync_to_async(cache.set)(key, value, timeout=timeout)
            logger.debug("Cache set: %s (timeout=%s)", key, timeout)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error setting cache: %s", e, exc_info=True)


# Global cache instance
cache_adapter = DjangoCacheAdapter()
