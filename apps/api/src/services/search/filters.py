"""
Filter registry and composer for worker search.

Each filter is an independent descriptor that compiles a WorkerSearchParams into
an optional predicate fragment. A fragment is either plain (a Field or an And of
Fields, implicitly ANDed with siblings) or OR-bearing (an Or over alternatives).

Combination rules:
- within one filter, selected values combine with OR (any match)
- across filters, fragments combine with AND (all must match)

Store values follow these conventions:
- gender: Title Case ("Male", "Female")
- services: display names ("Support Worker", "Home Modifications")
- languages: Title Case ("English", "Mandarin")
- date_of_birth: ISO text (YYYY-MM-DD); age: legacy integer
"""

import re
from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from src.core.constants import ALL, MAX_AGE, SERVICE_NAME_MAP
from src.schemas.search import WorkerSearchParams
from .predicates import MATCH_ALL, And, Field, Op, Or, Predicate, and_

_AGE_RANGE_RE = re.compile(r"^(\d+)\s*-\s*(\d+)$")
_AGE_OPEN_RE = re.compile(r"^(\d+)\s*\+$")
_DISPLAY_NAMES = {v.lower(): v for v in SERVICE_NAME_MAP.values()}


def to_title_case(s: str) -> str:
    """'hello WORLD' -> 'Hello World'."""
    return " ".join(w[:1].upper() + w[1:].lower() for w in s.split(" "))


def normalize_service_name(token: str) -> str:
    """Map a kebab-case token (or any-case display name) to the stored display name."""
    t = token.strip()
    key = t.lower()
    if key in SERVICE_NAME_MAP:
        return SERVICE_NAME_MAP[key]
    return _DISPLAY_NAMES.get(key, t)


def parse_age_bucket(bucket: str | None) -> Optional[tuple[int, int]]:
    """'18-25' -> (18, 25); '60+' -> (60, MAX_AGE); anything else -> None."""
    if not bucket:
        return None
    b = bucket.strip().lower()
    if b == ALL:
        return None
    m = _AGE_OPEN_RE.match(b)
    if m:
        return int(m.group(1)), MAX_AGE
    m = _AGE_RANGE_RE.match(b)
    if m:
        lo, hi = int(m.group(1)), int(m.group(2))
        if lo > hi:
            lo, hi = hi, lo
        return lo, hi
    return None


class SearchFilter(ABC):
    """Compiles one aspect of a search into an optional predicate fragment."""

    name: str

    @abstractmethod
    def compile(self, params: WorkerSearchParams) -> Optional[Predicate]:
        pass


class TextSearchFilter(SearchFilter):
    """Case-insensitive substring over names; plain substring over the mobile number."""

    name = "search"

    def compile(self, params):
        term = (params.search or "").strip()
        if not term:
            return None
        return Or((
            Field("first_name", Op.ICONTAINS, term),
            Field("last_name", Op.ICONTAINS, term),
            Field("mobile", Op.CONTAINS, term),
        ))


class GenderFilter(SearchFilter):
    name = "gender"

    def compile(self, params):
        g = (params.gender or "").strip()
        if not g or g.lower() == ALL:
            return None
        return Field("gender", Op.EQ, to_title_case(g))


class AgeRangeFilter(SearchFilter):
    """
    Converts an age bucket to a birth-year range and matches on date_of_birth.
    Profiles without a date of birth fall back to the legacy integer age; the
    fallback branch requires date_of_birth IS NULL so it never overrides a
    birth-date mismatch.
    """

    name = "age"

    def __init__(self, today=None):
        self._today = today or date.today

    def compile(self, params):
        bounds = parse_age_bucket(params.age)
        if bounds is None:
            return None
        min_age, max_age = bounds
        current_year = self._today().year
        # Older age = earlier birth year
        max_birth_year = current_year - min_age
        min_birth_year = current_year - max_age
        return Or((
            And((
                Field("date_of_birth", Op.NOT_NULL),
                Field("date_of_birth", Op.GTE, f"{min_birth_year:04d}-01-01"),
                Field("date_of_birth", Op.LTE, f"{max_birth_year:04d}-12-31"),
            )),
            And((
                Field("date_of_birth", Op.IS_NULL),
                Field("age", Op.GTE, min_age),
                Field("age", Op.LTE, max_age),
            )),
        ))


class ServicesFilter(SearchFilter):
    name = "services"

    def compile(self, params):
        names = [normalize_service_name(s) for s in params.services if s and s.lower() != ALL]
        if not names:
            return None
        return Field("services", Op.HAS_ANY, tuple(dict.fromkeys(names)))


class LanguagesFilter(SearchFilter):
    """Any-of over the detailed (additional info) languages, falling back to profile languages."""

    name = "languages"

    def compile(self, params):
        if not params.languages:
            return None
        langs = tuple(dict.fromkeys(to_title_case(l) for l in params.languages))
        return Or((
            Field("additional_languages", Op.HAS_ANY, langs),
            Field("languages", Op.HAS_ANY, langs),
        ))


class AnyOfFilter(SearchFilter):
    """Generic multi-select: the profile's set must intersect the selected values."""

    def __init__(self, name: str, attr: str, field_name: str):
        self.name = name
        self._attr = attr
        self._field_name = field_name

    def compile(self, params):
        values = getattr(params, self._attr) or []
        if not values:
            return None
        return Field(self._field_name, Op.HAS_ANY, tuple(values))


# Order is stable so composed predicates (and their SQL) are deterministic
FILTER_REGISTRY: tuple[SearchFilter, ...] = (
    GenderFilter(),
    AgeRangeFilter(),
    ServicesFilter(),
    LanguagesFilter(),
    TextSearchFilter(),
    AnyOfFilter("therapeuticSubcategories", "therapeutic_subcategories", "therapeutic_subcategories"),
    AnyOfFilter("documentCategories", "document_categories", "document_categories"),
    AnyOfFilter("documentStatuses", "document_statuses", "document_statuses"),
    AnyOfFilter("documentTypes", "document_types", "document_types"),
)


def compose(fragments: list[Optional[Predicate]]) -> Predicate:
    """
    Combine fragments: each OR-bearing fragment becomes one ANDed clause, plain
    fragments merge into one flat AND. A single OR-bearing fragment with no plain
    fragments is returned unwrapped; no fragments at all means match-all.
    """
    active = [f for f in fragments if f is not None]
    if not active:
        return MATCH_ALL
    or_fragments = [f for f in active if isinstance(f, Or)]
    plain = and_(*[f for f in active if not isinstance(f, Or)])
    if not or_fragments:
        return plain if len(plain.children) != 1 else plain.children[0]
    if len(or_fragments) == 1 and not plain.children:
        return or_fragments[0]
    return And(tuple(or_fragments) + plain.children)


def build_predicate(
    params: WorkerSearchParams,
    registry: tuple[SearchFilter, ...] = FILTER_REGISTRY,
) -> Predicate:
    """Run every registered filter against params and compose the fragments."""
    return compose([f.compile(params) for f in registry])
