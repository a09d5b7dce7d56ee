"""Pagination state for retrieval operations.

`Pagination` tracks *where* to resume and how large each backend page may be.
A logical call reads one `Pagination` and returns a fresh one inside `Page`;
neither is mutated.
"""

from dataclasses import dataclass

from pydantic import BaseModel, Field


class Pagination(BaseModel, frozen=True):
    """Resume position for a logical retrieval call."""

    token: str = ""
    """Opaque resume token. Empty means start from the beginning."""

    limit: int = Field(default=0, ge=0)
    """Page-size cap per backend call (0 = backend default)."""


@dataclass(frozen=True, slots=True)
class Page[T]:
    """Records returned by one logical call plus the cursor for the next one."""

    items: list[T]
    pagination: Pagination

    @property
    def next_token(self) -> str:
        return self.pagination.token

    @property
    def has_more(self) -> bool:
        """Returns True if the backend reported more rows after this page."""
        return bool(self.pagination.token)
