"""Shape store rows into API result items."""

from datetime import date, datetime
from typing import Iterable, Optional

from src.schemas.search import WorkerSearchItem
from .store import WorkerRow


def parse_date_of_birth(value: Optional[str]) -> Optional[date]:
    """ISO date (optionally with a time part) -> date; anything else -> None."""
    if not value or not isinstance(value, str):
        return None
    v = value.strip()
    try:
        return date.fromisoformat(v[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def calculate_age(date_of_birth: Optional[str], today: Optional[date] = None) -> Optional[int]:
    """Whole years since date_of_birth; one less if this year's birthday has not come yet."""
    dob = parse_date_of_birth(date_of_birth)
    if dob is None:
        return None
    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


def resolve_languages(additional: Iterable[str], profile: Iterable[str]) -> list[str]:
    additional = [l for l in additional if l]
    if additional:
        return additional
    return [l for l in profile if l]


def unique_services(names: Iterable[Optional[str]]) -> list[str]:
    return list(dict.fromkeys(n for n in names if n))


def row_to_item(row: WorkerRow, today: Optional[date] = None) -> WorkerSearchItem:
    """Date of birth stays internal; age shown is derived from it when possible."""
    age = calculate_age(row.date_of_birth, today)
    if age is None:
        age = row.age
    return WorkerSearchItem(
        id=row.id,
        user_id=row.user_id,
        first_name=row.first_name,
        last_name=row.last_name,
        mobile=row.mobile,
        email=row.email,
        gender=row.gender,
        age=age,
        languages=resolve_languages(row.additional_languages, row.languages),
        services=unique_services(row.services),
        city=row.city,
        state=row.state,
        postal_code=row.postal_code,
        latitude=row.latitude,
        longitude=row.longitude,
        experience=row.experience,
        introduction=row.introduction,
        photos=row.photos,
        created_at=row.created_at,
        updated_at=row.updated_at,
        distance=round(row.distance, 2) if row.distance is not None else None,
    )
