"""
IP geolocation for validation logs.

Looks up the requesting address with an HTTP JSON API (ipapi.co by
default). Private, loopback and malformed addresses are never looked up.
Successful lookups are cached; any failure yields no location.
"""
import ipaddress
import logging
from typing import Optional

import requests
from asgiref.sync import sync_to_async
from django.conf import settings

from audit.domain.entries import Location
from core.infrastructure.cache import CachePort
from core.infrastructure.cache_adapters import cache_adapter
from core.metrics import geolocation_lookups_total

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://ipapi.co/{ip}/json/"
USER_AGENT = "LicenseValidationService/1.0"


def is_public_address(ip: Optional[str]) -> bool:
    """True for a well-formed, globally routable address."""
    if not ip:
        return False
    try:
        return ipaddress.ip_address(ip).is_global
    except ValueError:
        return False


class GeolocationService:
    """Resolves an IP address to an approximate Location."""

    def __init__(
        self,
        cache: Optional[CachePort] = None,
        enabled: Optional[bool] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        cache_seconds: Optional[int] = None,
    ):
        """
        Initialize the service; unset options come from Django settings.
        """
        self.cache = cache or cache_adapter
        self.enabled = (
            enabled if enabled is not None else getattr(settings, "GEOLOCATION_ENABLED", False)
        )
        self.url = url or getattr(settings, "GEOLOCATION_URL", DEFAULT_URL)
        self.timeout = timeout or getattr(settings, "GEOLOCATION_TIMEOUT", 3.0)
        self.cache_seconds = cache_seconds or getattr(
            settings, "GEOLOCATION_CACHE_SECONDS", 86400
        )

    async def locate(self, ip: Optional[str]) -> Optional[Location]:
        """
        Resolve ``ip`` to a location.

        Args:
            ip: Requesting address

        Returns:
            Location, or None when disabled, not public or the lookup failed
        """
        if not self.enabled or not is_public_address(ip):
            return None

        cache_key = f"geolocation:{ip}"
        cached = await self.cache.get(cache_key)
        if cached is not None:
            geolocation_lookups_total.labels(result="cached").inc()
            return Location.from_record(cached)

        location = await sync_to_async(self.fetch, thread_sensitive=False)(ip)
        if location is not None:
            await self.cache.set(cache_key, location.to_record(), timeout=self.cache_seconds)
        return location

    def fetch(self, ip: str) -> Optional[Location]:
        """Query the lookup API (blocking)."""
        try:
            response = requests.get(
                self.url.format(ip=ip),
                headers={"User-Agent": USER_AGENT},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            geolocation_lookups_total.labels(result="error").inc()
            logger.warning("Geolocation lookup failed for %s: %s", ip, e)
            return None

        if not isinstance(data, dict) or data.get("error"):
            geolocation_lookups_total.labels(result="unknown").inc()
            return None

        geolocation_lookups_total.labels(result="resolved").inc()
        longitude, latitude = data.get("longitude"), data.get("latitude")
        return Location(
            city=data.get("city"),
            country=data.get("country_name"),
            country_code=data.get("country_code"),
            coordinates=(longitude, latitude) if longitude is not None and latitude is not None else None,
        )
