"""Parameter types for retrieval configuration.

Params define how a table is read (key names, projection, page size, paging
mode), while `Pagination` carries where to resume.
"""

from enum import StrEnum

from pydantic import BaseModel, Field


class PagingMode(StrEnum):
    """How many backend pages one logical call consumes."""

    SINGLE_PAGE = "single_page"
    """Stop after the first page and surface its continuation as the token."""

    DRAIN_ALL = "drain_all"
    """Keep fetching until the backend reports no continuation."""


class KeyType(StrEnum):
    """DynamoDB type descriptor of the key carried in resume tokens."""

    STRING = "S"
    NUMBER = "N"
    BINARY = "B"


class KeyValueParams(BaseModel, frozen=True):
    """Common parameters for partitioned key-value retrieval."""

    table: str
    """Target table name."""

    partition_key: str | None = None
    """Partition key attribute. Required for query mode."""

    projection: list[str] | None = None
    """Attributes to retrieve. If None, retrieves all attributes."""

    page_size: int = Field(default=0, ge=0)
    """Default page-size cap per backend call (0 = backend default)."""

    paging: PagingMode = PagingMode.SINGLE_PAGE
    """Default paging mode."""
