"""Profile store contract consumed by the search pipeline."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .predicates import Predicate


class StoreError(Exception):
    """Raised when a store query fails (not when it returns zero rows). Fatal for the search."""


@dataclass(frozen=True)
class SortSpec:
    field: str  # logical name, e.g. created_at
    descending: bool = True


# sortBy query values -> logical sort fields
SORT_FIELDS = {
    "createdAt": "created_at",
    "firstName": "first_name",
    "lastName": "last_name",
    "city": "city",
    "state": "state",
}


def sort_spec(sort_by: str, sort_order: str) -> SortSpec:
    return SortSpec(field=SORT_FIELDS.get(sort_by, "created_at"), descending=sort_order != "asc")


@dataclass(frozen=True)
class WorkerRow:
    """The fixed projection fetched for search results. Never the full profile."""
    id: str
    user_id: str
    first_name: str
    last_name: str
    mobile: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    date_of_birth: Optional[str] = None
    languages: tuple[str, ...] = ()
    additional_languages: tuple[str, ...] = ()
    services: tuple[str, ...] = ()
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
    distance: Optional[float] = None


class ProfileStore(ABC):
    """Predicate-driven read access to worker profiles."""

    @abstractmethod
    async def count(self, predicate: Predicate) -> int:
        pass

    @abstractmethod
    async def fetch(
        self,
        predicate: Predicate,
        sort: Optional[SortSpec] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[WorkerRow]:
        """Rows matching predicate. Without offset/limit every match is returned."""
        pass
