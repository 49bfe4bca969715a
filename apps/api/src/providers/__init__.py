from .geocoding import (
    GeocodeResult,
    GeocodingProvider,
    GeocodingServiceError,
    GoogleGeocodingProvider,
    get_geocoding_provider,
)

__all__ = [
    "GeocodeResult",
    "GeocodingProvider",
    "GeocodingServiceError",
    "GoogleGeocodingProvider",
    "get_geocoding_provider",
]
