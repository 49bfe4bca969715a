"""In-process ProfileStore over plain records. Used by tests and local fixtures."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

from .predicates import And, Field, Op, Or, Predicate
from .store import ProfileStore, SortSpec, WorkerRow


@dataclass(frozen=True)
class DocumentRecord:
    requirement_type: str
    document_category: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class WorkerRecord:
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
    therapeutic_subcategories: tuple[str, ...] = ()
    documents: tuple[DocumentRecord, ...] = ()
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    experience: Optional[str] = None
    introduction: Optional[str] = None
    photos: Optional[str] = None
    is_published: bool = True
    is_deleted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def _set_values(record: WorkerRecord, name: str) -> Iterable[Any]:
    if name == "document_categories":
        return (d.document_category for d in record.documents)
    if name == "document_statuses":
        return (d.status for d in record.documents)
    if name == "document_types":
        return (d.requirement_type for d in record.documents)
    return getattr(record, name)


def _compare(op: Op, actual: Any, expected: Any) -> bool:
    if op is Op.IS_NULL:
        return actual is None
    if op is Op.NOT_NULL:
        return actual is not None
    # SQL semantics: comparisons against NULL are never true
    if actual is None:
        return False
    if op is Op.EQ:
        return actual == expected
    if op is Op.IN:
        return actual in expected
    if op is Op.ICONTAINS:
        return str(expected).lower() in str(actual).lower()
    if op is Op.CONTAINS:
        return str(expected) in str(actual)
    if op is Op.GTE:
        return actual >= expected
    if op is Op.LTE:
        return actual <= expected
    raise ValueError(f"Unsupported operator {op}")


def evaluate(predicate: Predicate, record: WorkerRecord) -> bool:
    if isinstance(predicate, Field):
        if predicate.op is Op.HAS_ANY:
            wanted = set(predicate.value)
            return any(v in wanted for v in _set_values(record, predicate.name) if v is not None)
        return _compare(predicate.op, getattr(record, predicate.name), predicate.value)
    if isinstance(predicate, And):
        return all(evaluate(c, record) for c in predicate.children)
    if isinstance(predicate, Or):
        return any(evaluate(c, record) for c in predicate.children)
    raise TypeError(f"Not a predicate: {predicate!r}")


def _sort_key(value: Any) -> tuple[bool, Any]:
    # NULLs compare greatest, as in PostgreSQL
    return (value is None, value if value is not None else 0)


def to_row(record: WorkerRecord) -> WorkerRow:
    return WorkerRow(
        id=record.id,
        user_id=record.user_id,
        first_name=record.first_name,
        last_name=record.last_name,
        mobile=record.mobile,
        email=record.email,
        gender=record.gender,
        age=record.age,
        date_of_birth=record.date_of_birth,
        languages=record.languages,
        additional_languages=record.additional_languages,
        services=record.services,
        city=record.city,
        state=record.state,
        postal_code=record.postal_code,
        latitude=record.latitude,
        longitude=record.longitude,
        experience=record.experience,
        introduction=record.introduction,
        photos=record.photos,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class InMemoryProfileStore(ProfileStore):
    """Orders like PostgreSQL: NULLs last ascending, first descending; ties broken by id."""

    def __init__(self, records: Iterable[WorkerRecord] = ()):
        self.records = list(records)
        self.count_calls = 0
        self.fetch_calls = 0

    def _matching(self, predicate: Predicate) -> list[WorkerRecord]:
        return [r for r in self.records if evaluate(predicate, r)]

    async def count(self, predicate: Predicate) -> int:
        self.count_calls += 1
        return len(self._matching(predicate))

    async def fetch(
        self,
        predicate: Predicate,
        sort: Optional[SortSpec] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[WorkerRow]:
        self.fetch_calls += 1
        matches = self._matching(predicate)
        if sort is not None:
            matches.sort(key=lambda r: r.id)
            # Stable sorts: the id order survives among equal keys, even when reversed
            matches.sort(key=lambda r: _sort_key(getattr(r, sort.field)), reverse=sort.descending)
        start = offset or 0
        end = start + limit if limit is not None else None
        return [to_row(r) for r in matches[start:end]]
