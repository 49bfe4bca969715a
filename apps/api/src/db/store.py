"""PostgreSQL-backed ProfileStore."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import load_only, selectinload

from src.db.models import User, WorkerAdditionalInfo, WorkerProfile, WorkerService
from src.db.predicates import SORT_COLUMNS, to_sql
from src.services.search.predicates import Predicate
from src.services.search.store import ProfileStore, SortSpec, StoreError, WorkerRow

logger = logging.getLogger(__name__)

# Columns fetched for search results; the full profile is never loaded
_PROJECTION = (
    WorkerProfile.id,
    WorkerProfile.user_id,
    WorkerProfile.first_name,
    WorkerProfile.last_name,
    WorkerProfile.mobile,
    WorkerProfile.gender,
    WorkerProfile.age,
    WorkerProfile.date_of_birth,
    WorkerProfile.languages,
    WorkerProfile.city,
    WorkerProfile.state,
    WorkerProfile.postal_code,
    WorkerProfile.latitude,
    WorkerProfile.longitude,
    WorkerProfile.experience,
    WorkerProfile.introduction,
    WorkerProfile.photos,
    WorkerProfile.created_at,
    WorkerProfile.updated_at,
)


def _row_from_profile(p: WorkerProfile) -> WorkerRow:
    return WorkerRow(
        id=str(p.id),
        user_id=str(p.user_id),
        first_name=p.first_name,
        last_name=p.last_name,
        mobile=p.mobile,
        email=p.user.email if p.user else None,
        gender=p.gender,
        age=p.age,
        date_of_birth=p.date_of_birth,
        languages=tuple(p.languages or ()),
        additional_languages=tuple(p.additional_info.languages or ()) if p.additional_info else (),
        services=tuple(s.category_name for s in (p.services or [])),
        city=p.city,
        state=p.state,
        postal_code=p.postal_code,
        latitude=p.latitude,
        longitude=p.longitude,
        experience=p.experience,
        introduction=p.introduction,
        photos=p.photos,
        created_at=p.created_at,
        updated_at=p.updated_at,
    )


def build_fetch_statement(
    predicate: Predicate,
    sort: Optional[SortSpec] = None,
    offset: Optional[int] = None,
    limit: Optional[int] = None,
):
    stmt = (
        select(WorkerProfile)
        .options(
            load_only(*_PROJECTION),
            selectinload(WorkerProfile.services).load_only(WorkerService.category_name),
            selectinload(WorkerProfile.additional_info).load_only(WorkerAdditionalInfo.languages),
            selectinload(WorkerProfile.user).load_only(User.email),
        )
        .where(to_sql(predicate))
    )
    if sort is not None:
        col = SORT_COLUMNS[sort.field]
        stmt = stmt.order_by(col.desc() if sort.descending else col.asc(), WorkerProfile.id.asc())
    if offset:
        stmt = stmt.offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    return stmt


def build_count_statement(predicate: Predicate):
    return select(func.count()).select_from(WorkerProfile).where(to_sql(predicate))


class SqlAlchemyProfileStore(ProfileStore):
    """Each call opens its own session, so concurrent count/fetch never share a connection."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def count(self, predicate: Predicate) -> int:
        try:
            async with self._session_factory() as session:
                result = await session.execute(build_count_statement(predicate))
                return int(result.scalar_one())
        except SQLAlchemyError as e:
            logger.exception("Worker count query failed")
            raise StoreError(f"Database query failed: {e}") from e

    async def fetch(
        self,
        predicate: Predicate,
        sort: Optional[SortSpec] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[WorkerRow]:
        stmt = build_fetch_statement(predicate, sort=sort, offset=offset, limit=limit)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [_row_from_profile(p) for p in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.exception("Worker fetch query failed")
            raise StoreError(f"Database query failed: {e}") from e
