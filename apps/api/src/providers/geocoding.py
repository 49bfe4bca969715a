from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx

from src.core import get_settings


class GeocodingServiceError(Exception):
    """Raised when the geocoding API is unavailable or returns an error status."""


@dataclass(frozen=True)
class GeocodeResult:
    latitude: float
    longitude: float
    formatted_address: str


class GeocodingProvider(ABC):
    @abstractmethod
    async def geocode(self, address: str) -> Optional[GeocodeResult]:
        """Coordinates for address, or None when the provider finds no match."""
        pass


class GoogleGeocodingProvider(GeocodingProvider):
    """Google Maps Geocoding JSON API. Each call is billed, so callers cache results."""

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://maps.googleapis.com/maps/api/geocode/json",
        region_suffix: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.region_suffix = (region_suffix or "").strip() or None
        self.timeout = timeout
        self._transport = transport

    def _query(self, address: str) -> str:
        if self.region_suffix:
            return f"{address}, {self.region_suffix}"
        return address

    async def geocode(self, address: str) -> Optional[GeocodeResult]:
        params = {"address": self._query(address), "key": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.get(self.api_url, params=params)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPStatusError as e:
            raise GeocodingServiceError(
                f"Geocoding API returned {e.response.status_code}."
            ) from e
        except httpx.RequestError as e:
            raise GeocodingServiceError(
                "Geocoding service unavailable (timeout or connection error)."
            ) from e
        except ValueError as e:
            raise GeocodingServiceError("Geocoding API returned invalid JSON.") from e

        status = data.get("status") if isinstance(data, dict) else None
        if status == "ZERO_RESULTS":
            return None
        if status != "OK":
            detail = data.get("error_message") if isinstance(data, dict) else None
            raise GeocodingServiceError(
                f"Geocoding API status {status}" + (f": {detail}" if detail else "")
            )
        try:
            results = data.get("results") or []
            if not results:
                return None
            first = results[0]
            loc = first["geometry"]["location"]
            return GeocodeResult(
                latitude=float(loc["lat"]),
                longitude=float(loc["lng"]),
                formatted_address=first.get("formatted_address") or address,
            )
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            raise GeocodingServiceError(
                "Geocoding API returned unexpected response format."
            ) from e


def get_geocoding_provider() -> GeocodingProvider | None:
    """Configured provider, or None when no API key is set (distance search is then unavailable)."""
    s = get_settings()
    if not s.geocode_api_key:
        return None
    return GoogleGeocodingProvider(
        api_key=s.geocode_api_key,
        api_url=s.geocode_api_url,
        region_suffix=s.geocode_region_suffix,
        timeout=s.geocode_timeout_seconds,
    )
