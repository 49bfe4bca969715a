"""Pydantic request/response schemas."""

from src.schemas.search import (
    WorkerSearchParams,
    WorkerSearchItem,
    PaginationMeta,
    WorkerSearchResponse,
    ErrorResponse,
    FilterOption,
    DocumentSubmissionStats,
    FilterOptionsData,
    FilterOptionsResponse,
)

__all__ = [
    "WorkerSearchParams",
    "WorkerSearchItem",
    "PaginationMeta",
    "WorkerSearchResponse",
    "ErrorResponse",
    "FilterOption",
    "DocumentSubmissionStats",
    "FilterOptionsData",
    "FilterOptionsResponse",
]
