"""Search service facade.

Business logic is split across:
- search pipeline: src.services.search.search_logic
- filter options: src.services.search.filter_options
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.schemas.search import FilterOptionsData, WorkerSearchParams, WorkerSearchResponse
from src.services.geocoding import Geocoder
from .filter_options import load_filter_options
from .search_logic import run_worker_search
from .store import ProfileStore


class SearchService:
    """Facade for worker search operations."""

    @staticmethod
    async def search_workers(
        store: ProfileStore,
        geocoder: Optional[Geocoder],
        params: WorkerSearchParams,
    ) -> WorkerSearchResponse:
        return await run_worker_search(store, geocoder, params)

    @staticmethod
    async def filter_options(
        session_factory: async_sessionmaker[AsyncSession],
    ) -> FilterOptionsData:
        return await load_filter_options(session_factory)


search_service = SearchService()
