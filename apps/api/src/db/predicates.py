"""Render search predicate trees into SQLAlchemy WHERE clauses over WorkerProfile."""

from sqlalchemy import and_, false, or_, true
from sqlalchemy.sql.elements import ColumnElement

from src.core.constants import THERAPEUTIC_SUPPORTS_ID
from src.db.models import (
    VerificationRequirement,
    WorkerAdditionalInfo,
    WorkerProfile,
    WorkerService,
)
from src.services.search.predicates import And, Field, Op, Or, Predicate

_SCALAR_COLUMNS = {
    "first_name": WorkerProfile.first_name,
    "last_name": WorkerProfile.last_name,
    "mobile": WorkerProfile.mobile,
    "gender": WorkerProfile.gender,
    "age": WorkerProfile.age,
    "date_of_birth": WorkerProfile.date_of_birth,
    "city": WorkerProfile.city,
    "state": WorkerProfile.state,
    "postal_code": WorkerProfile.postal_code,
    "latitude": WorkerProfile.latitude,
    "longitude": WorkerProfile.longitude,
    "is_published": WorkerProfile.is_published,
    "is_deleted": WorkerProfile.is_deleted,
}

SORT_COLUMNS = {
    "created_at": WorkerProfile.created_at,
    "first_name": WorkerProfile.first_name,
    "last_name": WorkerProfile.last_name,
    "city": WorkerProfile.city,
    "state": WorkerProfile.state,
}


def _set_clause(name: str, values: list[str]) -> ColumnElement[bool]:
    """Any-of membership for set-valued fields; related rows become EXISTS subqueries."""
    if name == "languages":
        return WorkerProfile.languages.overlap(values)
    if name == "additional_languages":
        return WorkerProfile.additional_info.has(WorkerAdditionalInfo.languages.overlap(values))
    if name == "services":
        return WorkerProfile.services.any(WorkerService.category_name.in_(values))
    if name == "therapeutic_subcategories":
        return WorkerProfile.services.any(
            and_(
                WorkerService.category_id == THERAPEUTIC_SUPPORTS_ID,
                WorkerService.subcategory_ids.overlap(values),
            )
        )
    if name == "document_categories":
        return WorkerProfile.verification_requirements.any(
            VerificationRequirement.document_category.in_(values)
        )
    if name == "document_statuses":
        return WorkerProfile.verification_requirements.any(VerificationRequirement.status.in_(values))
    if name == "document_types":
        return WorkerProfile.verification_requirements.any(
            VerificationRequirement.requirement_type.in_(values)
        )
    raise ValueError(f"No SQL mapping for set field {name}")


def _field_clause(f: Field) -> ColumnElement[bool]:
    if f.op is Op.HAS_ANY:
        if not f.value:
            return false()
        return _set_clause(f.name, list(f.value))
    col = _SCALAR_COLUMNS.get(f.name)
    if col is None:
        raise ValueError(f"No SQL mapping for field {f.name}")
    if f.op is Op.EQ:
        return col == f.value
    if f.op is Op.IN:
        return col.in_(list(f.value)) if f.value else false()
    if f.op is Op.ICONTAINS:
        return col.icontains(f.value, autoescape=True)
    if f.op is Op.CONTAINS:
        return col.contains(f.value, autoescape=True)
    if f.op is Op.GTE:
        return col >= f.value
    if f.op is Op.LTE:
        return col <= f.value
    if f.op is Op.IS_NULL:
        return col.is_(None)
    if f.op is Op.NOT_NULL:
        return col.isnot(None)
    raise ValueError(f"Unsupported operator {f.op}")


def to_sql(predicate: Predicate) -> ColumnElement[bool]:
    if isinstance(predicate, Field):
        return _field_clause(predicate)
    if isinstance(predicate, And):
        if not predicate.children:
            return true()
        return and_(*[to_sql(c) for c in predicate.children])
    if isinstance(predicate, Or):
        if not predicate.children:
            return false()
        return or_(*[to_sql(c) for c in predicate.children])
    raise TypeError(f"Not a predicate: {predicate!r}")


__all__ = ["to_sql", "SORT_COLUMNS"]
