"""Address -> coordinates resolution with a bounded, expiring in-process cache."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from src.core import get_settings
from src.providers.geocoding import (
    GeocodeResult,
    GeocodingProvider,
    GeocodingServiceError,
    get_geocoding_provider,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _CacheEntry:
    result: GeocodeResult
    stored_at: float


def normalize_address(address: str) -> str:
    return address.strip().lower()


class GeocodeCache:
    """
    Capacity-bounded map of normalized address -> GeocodeResult.

    Entries expire ttl_seconds after they were stored. When full, inserting a new
    key evicts the oldest-inserted entry; reads do not refresh an entry's
    position, so this is insertion order and not LRU. Guarded by a lock so one
    instance can be shared by concurrent requests. Process-local only.
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int,
        clock: Callable[[], float] = time.time,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, address: str) -> Optional[GeocodeResult]:
        key = normalize_address(address)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return entry.result

    def put(self, address: str, result: GeocodeResult) -> None:
        key = normalize_address(address)
        with self._lock:
            if key in self._entries:
                # Overwrite keeps the original insertion slot
                self._entries[key] = _CacheEntry(result, self._clock())
                return
            while len(self._entries) >= self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
            self._entries[key] = _CacheEntry(result, self._clock())


class Geocoder:
    """
    Cached front for a GeocodingProvider. resolve() never raises: provider errors
    and no-match both come back as None so distance search can fall back to
    standard search. Concurrent misses for the same address may each call the
    provider; the last result stored wins.
    """

    def __init__(self, provider: Optional[GeocodingProvider], cache: GeocodeCache):
        self.provider = provider
        self.cache = cache

    async def resolve(self, address: str) -> Optional[GeocodeResult]:
        if not address or not address.strip():
            return None
        cached = self.cache.get(address)
        if cached is not None:
            logger.debug("Geocode cache hit for %r", normalize_address(address))
            return cached
        logger.debug("Geocode cache miss for %r", normalize_address(address))
        if self.provider is None:
            logger.warning("Geocoding requested but no provider is configured")
            return None
        try:
            result = await self.provider.geocode(address.strip())
        except GeocodingServiceError as e:
            logger.warning("Geocoding failed for %r: %s", address, e)
            return None
        except Exception:
            logger.warning("Unexpected geocoding error for %r", address, exc_info=True)
            return None
        if result is None:
            logger.info("No geocoding match for %r", address)
            return None
        self.cache.put(address, result)
        return result

    async def resolve_parts(
        self,
        city: Optional[str] = None,
        state: Optional[str] = None,
        postal_code: Optional[str] = None,
    ) -> Optional[GeocodeResult]:
        """Resolve a structured location (as captured at registration) via the same cache."""
        parts = [p.strip() for p in (city, state, postal_code) if p and p.strip()]
        if not parts:
            return None
        return await self.resolve(", ".join(parts))


def create_geocoder(provider: Optional[GeocodingProvider] = None) -> Geocoder:
    """Geocoder wired from settings. One per application instance."""
    s = get_settings()
    cache = GeocodeCache(
        ttl_seconds=s.geocode_cache_ttl_seconds,
        max_entries=s.geocode_cache_max_entries,
    )
    return Geocoder(provider if provider is not None else get_geocoding_provider(), cache)
