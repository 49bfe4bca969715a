from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.core.constants import (
    ALL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_ORDER,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    NO_DISTANCE,
    SORTABLE_FIELDS,
)


class CamelModel(BaseModel):
    """Serialises as camelCase (the admin UI contract) while keeping snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Query-string parsing
# ---------------------------------------------------------------------------

def _int_or_default(v: Any, default: int) -> int:
    try:
        return int(str(v).strip())
    except (TypeError, ValueError):
        return default


def clamp_page(v: Any) -> int:
    """Page number, at least 1; malformed input means page 1."""
    return max(1, _int_or_default(v, 1))


def clamp_page_size(v: Any) -> int:
    """Page size clamped to [MIN_PAGE_SIZE, MAX_PAGE_SIZE]; malformed input means the default."""
    return min(MAX_PAGE_SIZE, max(MIN_PAGE_SIZE, _int_or_default(v, DEFAULT_PAGE_SIZE)))


def _str_strip_or_none(s: Optional[str]) -> Optional[str]:
    if s is None or not isinstance(s, str):
        return None
    t = s.strip()
    return t if t else None


def _dedupe_list(items: list[str]) -> list[str]:
    """Dedupe preserving order."""
    seen: set[str] = set()
    out: list[str] = []
    for x in items:
        if x in seen:
            continue
        seen.add(x)
        out.append(x)
    return out


def _getlist(params: Mapping[str, Any], key: str) -> list[str]:
    """All raw values for key (also key[]), each split on commas."""
    raw: list[Any] = []
    for k in (key, f"{key}[]"):
        if hasattr(params, "getlist"):
            raw.extend(params.getlist(k))
        else:
            v = params.get(k)
            if isinstance(v, (list, tuple)):
                raw.extend(v)
            elif v is not None:
                raw.append(v)
    values: list[str] = []
    for item in raw:
        values.extend(part.strip() for part in str(item).split(","))
    return _dedupe_list([v for v in values if v])


def _first(params: Mapping[str, Any], *keys: str) -> Optional[str]:
    for k in keys:
        v = params.get(k)
        if isinstance(v, (list, tuple)):
            v = v[0] if v else None
        v = _str_strip_or_none(v) if v is not None else None
        if v:
            return v
    return None


class WorkerSearchParams(BaseModel):
    """One search request, already clamped. Built fresh per request."""
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    search: Optional[str] = None
    location: Optional[str] = None
    distance: str = NO_DISTANCE
    gender: Optional[str] = None
    age: Optional[str] = None
    services: list[str] = []
    languages: list[str] = []
    therapeutic_subcategories: list[str] = []
    document_categories: list[str] = []
    document_statuses: list[str] = []
    document_types: list[str] = []
    sort_by: str = DEFAULT_SORT_FIELD
    sort_order: str = DEFAULT_SORT_ORDER

    @property
    def is_distance_search(self) -> bool:
        """Distance mode is selected exactly when a non-empty location is supplied."""
        return bool(self.location and self.location.strip())

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "WorkerSearchParams":
        """Parse query-string parameters. Never raises: bad values are clamped or defaulted."""
        services = _getlist(params, "services")
        if not services:
            # Legacy single-select parameter
            legacy = _first(params, "typeOfSupport")
            if legacy and legacy.lower() != ALL:
                services = [legacy]
        sort_by = _first(params, "sortBy") or DEFAULT_SORT_FIELD
        if sort_by not in SORTABLE_FIELDS:
            sort_by = DEFAULT_SORT_FIELD
        sort_order = (_first(params, "sortOrder") or DEFAULT_SORT_ORDER).lower()
        if sort_order not in ("asc", "desc"):
            sort_order = DEFAULT_SORT_ORDER
        return cls(
            page=clamp_page(params.get("page")),
            page_size=clamp_page_size(params.get("pageSize")),
            search=_first(params, "search"),
            location=_first(params, "location"),
            distance=(_first(params, "distance", "within") or NO_DISTANCE).lower(),
            gender=_first(params, "gender"),
            age=_first(params, "age"),
            services=services,
            languages=_getlist(params, "languages"),
            therapeutic_subcategories=_getlist(params, "therapeuticSubcategories"),
            document_categories=_getlist(params, "documentCategories"),
            document_statuses=_getlist(params, "documentStatuses"),
            document_types=_getlist(params, "documentTypes") or _getlist(params, "requirementTypes"),
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def applied_filters(self) -> dict[str, Any]:
        """Filters that actually constrain the search, keyed as in the query string."""
        applied: dict[str, Any] = {}
        if self.search:
            applied["search"] = self.search
        if self.location:
            applied["location"] = self.location
        if self.distance and self.distance != NO_DISTANCE:
            applied["distance"] = self.distance
        if self.gender and self.gender.lower() != ALL:
            applied["gender"] = self.gender
        if self.age and self.age.lower() != ALL:
            applied["age"] = self.age
        list_keys = (
            ("services", self.services),
            ("languages", self.languages),
            ("therapeuticSubcategories", self.therapeutic_subcategories),
            ("documentCategories", self.document_categories),
            ("documentStatuses", self.document_statuses),
            ("documentTypes", self.document_types),
        )
        for key, values in list_keys:
            if values:
                applied[key] = list(values)
        return applied


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class WorkerSearchItem(CamelModel):
    id: str
    user_id: str
    first_name: str
    last_name: str
    mobile: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    languages: list[str] = []
    services: list[str] = []
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    experience: Optional[str] = None
    introduction: Optional[str] = None
    photos: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    distance: Optional[float] = None  # km, distance mode only


class PaginationMeta(CamelModel):
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool


class WorkerSearchResponse(CamelModel):
    success: bool = True
    data: list[WorkerSearchItem] = []
    pagination: PaginationMeta
    # Keys mirror the query string, so they are not re-aliased
    applied_filters: dict[str, Any] = {}


class ErrorResponse(CamelModel):
    success: bool = False
    error: str
    message: Optional[str] = None


class FilterOption(CamelModel):
    value: str
    label: str
    category: Optional[str] = None
    count: Optional[int] = None


class DocumentSubmissionStats(CamelModel):
    total_profiles: int = 0
    profiles_with_documents: int = 0
    profiles_with_all_approved: int = 0
    profiles_with_any_rejected: int = 0
    profiles_with_pending: int = 0


class FilterOptionsData(CamelModel):
    document_categories: list[FilterOption] = []
    document_statuses: list[FilterOption] = []
    document_types: list[FilterOption] = []
    document_submission_filters: list[FilterOption] = []
    services: list[FilterOption] = []
    age_buckets: list[FilterOption] = []
    distances: list[FilterOption] = []
    stats: DocumentSubmissionStats = DocumentSubmissionStats()


class FilterOptionsResponse(CamelModel):
    success: bool = True
    data: FilterOptionsData
