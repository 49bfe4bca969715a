"""Runs composed predicates against a ProfileStore."""

import asyncio

from .predicates import Field, Op, Predicate, and_
from .geo import BoundingBox
from .store import ProfileStore, SortSpec, WorkerRow

# Soft-deleted profiles never appear in search
NOT_DELETED = Field("is_deleted", Op.EQ, False)


def standard_predicate(filters: Predicate) -> Predicate:
    return and_(NOT_DELETED, filters)


def distance_predicate(filters: Predicate, box: BoundingBox) -> Predicate:
    """Filters plus the bounding box; rows without coordinates are excluded up front."""
    return and_(
        NOT_DELETED,
        filters,
        Field("latitude", Op.NOT_NULL),
        Field("longitude", Op.NOT_NULL),
        Field("latitude", Op.GTE, box.min_lat),
        Field("latitude", Op.LTE, box.max_lat),
        Field("longitude", Op.GTE, box.min_lon),
        Field("longitude", Op.LTE, box.max_lon),
    )


async def fetch_page(
    store: ProfileStore,
    predicate: Predicate,
    sort: SortSpec,
    offset: int,
    limit: int,
) -> tuple[int, list[WorkerRow]]:
    """
    Count and page fetch issued together and awaited jointly. The two reads do not
    share a transaction, so total and page may disagree slightly under concurrent
    writes. If either fails the whole call fails.
    """
    total, rows = await asyncio.gather(
        store.count(predicate),
        store.fetch(predicate, sort=sort, offset=offset, limit=limit),
    )
    return total, rows


async def fetch_all(store: ProfileStore, predicate: Predicate) -> list[WorkerRow]:
    """Every match, unpaged; used in distance mode where ordering happens after the fetch."""
    return await store.fetch(predicate)
