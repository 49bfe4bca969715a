"""Worker search pipeline: compose filters, pick a mode, execute, rank, paginate."""

import logging
import time
from datetime import date
from typing import Optional

from src.schemas.search import WorkerSearchParams, WorkerSearchResponse
from src.services.geocoding import Geocoder
from .executor import distance_predicate, fetch_all, fetch_page, standard_predicate
from .filters import FILTER_REGISTRY, SearchFilter, build_predicate
from .geo import bounding_box, rank_by_distance, resolve_radius_km
from .pagination import build_pagination, page_offset, slice_page
from .predicates import Predicate, describe
from .store import ProfileStore, sort_spec
from .transform import row_to_item

logger = logging.getLogger(__name__)

MODE_STANDARD = "standard"
MODE_DISTANCE = "distance"


async def _run_standard(store: ProfileStore, filters: Predicate, params: WorkerSearchParams):
    """Pagination and sort are pushed down to the store."""
    total, rows = await fetch_page(
        store,
        standard_predicate(filters),
        sort=sort_spec(params.sort_by, params.sort_order),
        offset=page_offset(params.page, params.page_size),
        limit=params.page_size,
    )
    return total, rows


async def _run_distance(
    store: ProfileStore,
    filters: Predicate,
    params: WorkerSearchParams,
    lat: float,
    lon: float,
    radius_km: float,
):
    """All box candidates are fetched; exact distance decides membership and order."""
    box = bounding_box(lat, lon, radius_km)
    candidates = await fetch_all(store, distance_predicate(filters, box))
    ranked = rank_by_distance(candidates, lat, lon, radius_km)
    logger.debug(
        "Distance search: %d box candidates, %d within %.1f km",
        len(candidates),
        len(ranked),
        radius_km,
    )
    return len(ranked), slice_page(ranked, params.page, params.page_size)


async def run_worker_search(
    store: ProfileStore,
    geocoder: Optional[Geocoder],
    params: WorkerSearchParams,
    registry: tuple[SearchFilter, ...] = FILTER_REGISTRY,
    today: Optional[date] = None,
) -> WorkerSearchResponse:
    """
    Run one search. Distance mode is used when a location is given and resolves to
    coordinates; an unresolvable location falls back to standard mode. StoreError
    propagates; no partial results are returned.
    """
    started = time.perf_counter()
    filters = build_predicate(params, registry)
    applied = params.applied_filters()
    mode = MODE_STANDARD

    coords = None
    if params.is_distance_search:
        if geocoder is not None:
            coords = await geocoder.resolve(params.location)
        if coords is None:
            logger.info(
                "Location %r could not be geocoded, falling back to standard search",
                params.location,
            )

    if coords is not None:
        mode = MODE_DISTANCE
        radius_km = resolve_radius_km(params.distance)
        applied["radiusKm"] = radius_km
        total, rows = await _run_distance(
            store, filters, params, coords.latitude, coords.longitude, radius_km
        )
    else:
        total, rows = await _run_standard(store, filters, params)

    response = WorkerSearchResponse(
        success=True,
        data=[row_to_item(r, today) for r in rows],
        pagination=build_pagination(total, params.page, params.page_size),
        applied_filters=applied,
    )
    logger.info(
        "Worker search done | mode=%s total=%d page=%d returned=%d duration_ms=%.1f filters=%s",
        mode,
        total,
        params.page,
        len(rows),
        (time.perf_counter() - started) * 1000,
        describe(filters),
    )
    return response
