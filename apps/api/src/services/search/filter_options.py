"""Filter options for the admin search UI, read live from the database."""

import asyncio
import logging
import re
from typing import Any, Iterable, Optional

from sqlalchemy import case, distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.constants import (
    AGE_BUCKETS,
    EXCLUDED_FILTER_DOCUMENT_IDS,
    NO_DISTANCE,
    RADIUS_PRESETS_KM,
    SERVICE_NAME_MAP,
)
from src.db.models import Document, VerificationRequirement, WorkerProfile
from src.schemas.search import (
    DocumentSubmissionStats,
    FilterOption,
    FilterOptionsData,
)
from .store import StoreError

logger = logging.getLogger(__name__)

_WORD_START = re.compile(r"\b\w")


class FilterOptionsError(StoreError):
    """A filter options query failed."""


def category_label(value: str) -> str:
    """WORKING_RIGHTS -> Working Rights."""
    return _WORD_START.sub(lambda m: m.group(0).upper(), value.replace("_", " ").lower())


def status_label(value: str) -> str:
    """APPROVED -> Approved."""
    return value[:1] + value[1:].lower()


def submission_filters(stats: DocumentSubmissionStats) -> list[FilterOption]:
    without = stats.total_profiles - stats.profiles_with_documents
    entries = (
        ("has_documents", "Has Documents", stats.profiles_with_documents),
        ("no_documents", "No Documents", without),
        ("all_approved", "All Approved", stats.profiles_with_all_approved),
        ("any_rejected", "Has Rejected", stats.profiles_with_any_rejected),
        ("pending_review", "Pending Review", stats.profiles_with_pending),
    )
    return [FilterOption(value=v, label=f"{label} ({n})", count=n) for v, label, n in entries]


def build_filter_options(
    categories: Iterable[Optional[str]],
    statuses: Iterable[Optional[str]],
    documents: Iterable[tuple[str, str, Optional[str]]],
    stats: DocumentSubmissionStats,
) -> FilterOptionsData:
    """Assemble the options payload; documents are (id, name, category) from the master list."""
    excluded = set(EXCLUDED_FILTER_DOCUMENT_IDS)
    return FilterOptionsData(
        document_categories=[
            FilterOption(value=c, label=category_label(c)) for c in dict.fromkeys(categories) if c
        ],
        document_statuses=[
            FilterOption(value=s, label=status_label(s)) for s in dict.fromkeys(statuses) if s
        ],
        document_types=[
            FilterOption(value=doc_id, label=name, category=category)
            for doc_id, name, category in documents
            if doc_id not in excluded
        ],
        document_submission_filters=submission_filters(stats),
        services=[FilterOption(value=k, label=v) for k, v in SERVICE_NAME_MAP.items()],
        age_buckets=[FilterOption(value=b, label=b) for b in AGE_BUCKETS],
        distances=[FilterOption(value=NO_DISTANCE, label="Any distance")]
        + [FilterOption(value=str(km), label=f"Within {km} km") for km in RADIUS_PRESETS_KM],
        stats=stats,
    )


def _stats_statement():
    vr = VerificationRequirement
    return select(
        func.count(distinct(WorkerProfile.id)),
        func.count(distinct(case((vr.id.isnot(None), WorkerProfile.id)))),
        func.count(distinct(case((vr.status == "APPROVED", WorkerProfile.id)))),
        func.count(distinct(case((vr.status == "REJECTED", WorkerProfile.id)))),
        func.count(distinct(case((vr.status.in_(("PENDING", "SUBMITTED")), WorkerProfile.id)))),
    ).select_from(WorkerProfile).outerjoin(vr, vr.worker_profile_id == WorkerProfile.id).where(
        WorkerProfile.is_deleted.is_(False)
    )


async def _scalars(session_factory: async_sessionmaker[AsyncSession], stmt) -> list[Any]:
    async with session_factory() as session:
        return list((await session.execute(stmt)).scalars().all())


async def _rows(session_factory: async_sessionmaker[AsyncSession], stmt) -> list[tuple]:
    async with session_factory() as session:
        return [tuple(r) for r in (await session.execute(stmt)).all()]


async def load_filter_options(session_factory: async_sessionmaker[AsyncSession]) -> FilterOptionsData:
    """Four independent reads, each on its own session, awaited together."""
    try:
        categories, statuses, documents, stats_rows = await asyncio.gather(
            _scalars(
                session_factory,
                select(VerificationRequirement.document_category)
                .where(VerificationRequirement.document_category.isnot(None))
                .distinct()
                .order_by(VerificationRequirement.document_category),
            ),
            _scalars(
                session_factory,
                select(VerificationRequirement.status)
                .distinct()
                .order_by(VerificationRequirement.status),
            ),
            _rows(
                session_factory,
                select(Document.id, Document.name, Document.category)
                .where(Document.id.notin_(EXCLUDED_FILTER_DOCUMENT_IDS))
                .order_by(Document.name.asc()),
            ),
            _rows(session_factory, _stats_statement()),
        )
    except SQLAlchemyError as e:
        logger.exception("Filter options query failed")
        raise FilterOptionsError(f"Database query failed: {e}") from e

    stats = DocumentSubmissionStats()
    if stats_rows:
        total, with_docs, approved, rejected, pending = (int(n or 0) for n in stats_rows[0])
        stats = DocumentSubmissionStats(
            total_profiles=total,
            profiles_with_documents=with_docs,
            profiles_with_all_approved=approved,
            profiles_with_any_rejected=rejected,
            profiles_with_pending=pending,
        )
    return build_filter_options(categories, statuses, documents, stats)
