"""Store-independent predicate tree.

A predicate is one of:
- Field(name, op, value): a single comparison on a logical profile field
- And(children): all children must hold (empty And matches everything)
- Or(children): at least one child must hold

Field names are logical (see FIELD_NAMES); each store renders them into its own
query form. SQLAlchemy rendering lives in src.db.predicates, in-process
evaluation in src.services.search.memory_store.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class Op(str, Enum):
    EQ = "eq"
    IN = "in"
    ICONTAINS = "icontains"  # case-insensitive substring
    CONTAINS = "contains"  # case-sensitive substring
    GTE = "gte"
    LTE = "lte"
    IS_NULL = "is_null"
    NOT_NULL = "not_null"
    HAS_ANY = "has_any"  # set intersection is non-empty


# Scalar fields on the profile itself
SCALAR_FIELDS = frozenset({
    "first_name",
    "last_name",
    "mobile",
    "gender",
    "age",
    "date_of_birth",
    "city",
    "state",
    "postal_code",
    "latitude",
    "longitude",
    "is_published",
    "is_deleted",
})
# Set-valued fields (own arrays or related rows); only HAS_ANY applies
SET_FIELDS = frozenset({
    "languages",
    "additional_languages",
    "services",
    "therapeutic_subcategories",
    "document_categories",
    "document_statuses",
    "document_types",
})
FIELD_NAMES = SCALAR_FIELDS | SET_FIELDS

_VALUELESS_OPS = frozenset({Op.IS_NULL, Op.NOT_NULL})


@dataclass(frozen=True)
class Field:
    name: str
    op: Op
    value: Any = None

    def __post_init__(self):
        if self.name not in FIELD_NAMES:
            raise ValueError(f"Unknown predicate field: {self.name}")
        if self.name in SET_FIELDS and self.op is not Op.HAS_ANY:
            raise ValueError(f"Set field {self.name} only supports {Op.HAS_ANY.value}")
        if self.op in (Op.IN, Op.HAS_ANY):
            # Normalise to a tuple so the node stays hashable
            object.__setattr__(self, "value", tuple(self.value or ()))
        elif self.op not in _VALUELESS_OPS and self.value is None:
            raise ValueError(f"{self.op.value} on {self.name} requires a value")


@dataclass(frozen=True)
class And:
    children: tuple["Predicate", ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True)
class Or:
    children: tuple["Predicate", ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "children", tuple(self.children))


Predicate = Union[Field, And, Or]

MATCH_ALL = And(())


def and_(*predicates: Predicate) -> And:
    """AND predicates together, flattening nested Ands and dropping match-all nodes."""
    children: list[Predicate] = []
    for p in predicates:
        if isinstance(p, And):
            children.extend(p.children)
        else:
            children.append(p)
    return And(tuple(children))


def describe(predicate: Predicate) -> str:
    """Compact human-readable rendering for logs."""
    if isinstance(predicate, Field):
        if predicate.op in _VALUELESS_OPS:
            return f"{predicate.name} {predicate.op.value}"
        return f"{predicate.name} {predicate.op.value} {predicate.value!r}"
    if isinstance(predicate, And):
        if not predicate.children:
            return "TRUE"
        return "(" + " AND ".join(describe(c) for c in predicate.children) + ")"
    return "(" + " OR ".join(describe(c) for c in predicate.children) + ")"
