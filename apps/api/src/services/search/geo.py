"""Bounding-box pre-filter, haversine distance, and distance ranking."""

import logging
import math
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Protocol, TypeVar

from src.core.constants import (
    DEFAULT_RADIUS_KM,
    EARTH_RADIUS_KM,
    KM_PER_DEGREE_LAT,
    NO_DISTANCE,
)

logger = logging.getLogger(__name__)

# Rounding slack so points exactly on the circle stay inside the box
_BOX_EPSILON_DEG = 1e-9


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, lat: float, lon: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km on a sphere of radius EARTH_RADIUS_KM."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def bounding_box(lat: float, lon: float, radius_km: float) -> BoundingBox:
    """
    Rectangle guaranteed to contain every point within radius_km of (lat, lon).

    Starts from the flat-earth approximation (KM_PER_DEGREE_LAT per degree,
    longitude scaled by cos(lat)) and widens each side to the spherical extent
    where the flat estimate would be too tight. Near the poles, or when the box
    would cross the antimeridian, longitude spans the full [-180, 180].
    """
    if radius_km <= 0:
        raise ValueError("radius_km must be positive")

    angular = radius_km / EARTH_RADIUS_KM  # radians
    lat_delta = max(radius_km / KM_PER_DEGREE_LAT, math.degrees(angular)) + _BOX_EPSILON_DEG
    min_lat = max(-90.0, lat - lat_delta)
    max_lat = min(90.0, lat + lat_delta)

    cos_lat = math.cos(math.radians(lat))
    sin_ang = math.sin(angular) if angular < math.pi / 2 else 1.0
    covers_pole = max_lat >= 90.0 or min_lat <= -90.0
    if covers_pole or sin_ang >= cos_lat:
        return BoundingBox(min_lat, max_lat, -180.0, 180.0)

    flat_lon_delta = radius_km / (KM_PER_DEGREE_LAT * cos_lat)
    spherical_lon_delta = math.degrees(math.asin(sin_ang / cos_lat))
    lon_delta = max(flat_lon_delta, spherical_lon_delta) + _BOX_EPSILON_DEG
    min_lon = lon - lon_delta
    max_lon = lon + lon_delta
    if min_lon < -180.0 or max_lon > 180.0:
        return BoundingBox(min_lat, max_lat, -180.0, 180.0)
    return BoundingBox(min_lat, max_lat, min_lon, max_lon)


def resolve_radius_km(distance: Optional[str]) -> float:
    """
    Radius for distance mode. "none" (or missing) selects DEFAULT_RADIUS_KM; other
    values are parsed as km ("20", "20km"). Non-positive or malformed values fall
    back to the default. Wider radii are taken as given.
    """
    raw = (distance or NO_DISTANCE).strip().lower()
    if raw == NO_DISTANCE:
        return DEFAULT_RADIUS_KM
    if raw.endswith("km"):
        raw = raw[:-2].strip()
    try:
        radius = float(raw)
    except ValueError:
        logger.info("Unrecognised distance %r, using default radius %s km", distance, DEFAULT_RADIUS_KM)
        return DEFAULT_RADIUS_KM
    if not math.isfinite(radius) or radius <= 0:
        logger.info("Non-positive distance %r, using default radius %s km", distance, DEFAULT_RADIUS_KM)
        return DEFAULT_RADIUS_KM
    return radius


class _Located(Protocol):
    latitude: Optional[float]
    longitude: Optional[float]
    distance: Optional[float]


T = TypeVar("T", bound=_Located)


def rank_by_distance(
    candidates: Iterable[T],
    center_lat: float,
    center_lon: float,
    radius_km: float,
) -> list[T]:
    """
    Exact post-filter for bounding-box candidates: drop rows without both
    coordinates or farther than radius_km, attach the distance, sort ascending.
    Candidates must be dataclasses; copies are returned with distance set.
    """
    ranked: list[T] = []
    for c in candidates:
        if c.latitude is None or c.longitude is None:
            continue
        d = haversine_km(center_lat, center_lon, c.latitude, c.longitude)
        if d <= radius_km:
            ranked.append(replace(c, distance=d))
    ranked.sort(key=lambda c: c.distance)
    return ranked
