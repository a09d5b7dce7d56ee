"""Request, parameter and result types.

These types describe what flows through a retrieval call:
- `Filter` and `Operator` for the declarative predicate list
- `KeyValueParams`, `PagingMode` and `KeyType` for table-level configuration
- `Pagination` and `Page` for resume state and results
"""

from dynamo_dal.models.contexts import Page, Pagination
from dynamo_dal.models.filters import Filter, FilterValue, Operator, ScalarValue
from dynamo_dal.models.params import KeyType, KeyValueParams, PagingMode

__all__ = [
    # Contexts (runtime state)
    "Page",
    "Pagination",
    # Params (configuration)
    "KeyType",
    "KeyValueParams",
    "PagingMode",
    # Filters
    "Filter",
    "FilterValue",
    "Operator",
    "ScalarValue",
]
