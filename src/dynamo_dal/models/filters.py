"""Filter types accepted by the predicate compiler.

A request is a flat list of filters combined with AND. Each filter names one
attribute, one operator, and one comparison value.
"""

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, field_validator

# Scalar values DynamoDB can compare against.
type ScalarValue = str | int | Decimal | bool | bytes

# A scalar, or a homogeneous set of scalars (serialized as SS, NS or BS).
type FilterValue = (
    str
    | int
    | Decimal
    | bool
    | bytes
    | frozenset[str]
    | frozenset[int]
    | frozenset[Decimal]
    | frozenset[bytes]
)


class Operator(StrEnum):
    """Comparison applied by a single filter."""

    EQUAL_TO = "equal_to"
    """Attribute equals the value."""

    LESS_THAN = "less_than"
    """Attribute is strictly less than the value."""

    GREATER_THAN = "greater_than"
    """Attribute is strictly greater than the value."""

    MATCH_EXACT = "match_exact"
    """Alias of `EQUAL_TO`."""

    MATCH_ANY = "match_any"
    """Attribute contains the value, or at least one element of a set value."""

    MATCH_SUPERSET = "match_superset"
    """Attribute contains every element of the value."""

    MATCH_SUBSET = "match_subset"
    """Every element of the attribute is among the elements of the value."""

    @property
    def is_equality(self) -> bool:
        return self in (Operator.EQUAL_TO, Operator.MATCH_EXACT)


class Filter(BaseModel, frozen=True):
    """A single (attribute, operator, value) predicate."""

    name: str
    """Attribute name or document path (``a.b``)."""

    op: Operator
    """Comparison to apply."""

    value: FilterValue
    """Comparison value. Floats are stored as `Decimal`."""

    @field_validator("value", mode="before")
    @classmethod
    def _floats_to_decimal(cls, v: object) -> object:
        if isinstance(v, float):
            return Decimal(str(v))
        if isinstance(v, (set, frozenset, list, tuple)):
            return frozenset(Decimal(str(x)) if isinstance(x, float) else x for x in v)
        return v

    @property
    def is_set(self) -> bool:
        return isinstance(self.value, frozenset)
