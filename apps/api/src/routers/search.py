from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core import get_settings, limiter
from src.dependencies import (
    get_geocoder,
    get_profile_store,
    get_session_factory,
    require_search_role,
)
from src.schemas import (
    FilterOptionsResponse,
    WorkerSearchParams,
    WorkerSearchResponse,
)
from src.services import search_service
from src.services.geocoding import Geocoder
from src.services.search.store import ProfileStore

router = APIRouter(prefix="/workers", tags=["search"])


@router.get(
    "/search",
    response_model=WorkerSearchResponse,
    response_model_by_alias=True,
)
@limiter.limit(get_settings().search_rate_limit)
async def search_workers(
    request: Request,
    _claims: Annotated[dict[str, Any], Depends(require_search_role)],
    store: Annotated[ProfileStore, Depends(get_profile_store)],
    geocoder: Annotated[Optional[Geocoder], Depends(get_geocoder)],
):
    """
    Search worker profiles. Multi-value filters accept repeated keys, `key[]`,
    or comma-separated values. A `location` switches to distance search.
    """
    params = WorkerSearchParams.from_query_params(request.query_params)
    return await search_service.search_workers(store, geocoder, params)


@router.get(
    "/filters",
    response_model=FilterOptionsResponse,
    response_model_by_alias=True,
)
async def filter_options(
    _claims: Annotated[dict[str, Any], Depends(require_search_role)],
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
):
    data = await search_service.filter_options(session_factory)
    return FilterOptionsResponse(success=True, data=data)
