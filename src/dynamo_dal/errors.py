"""Error types for retrieval operations."""

from enum import StrEnum
from typing import final


class ErrorKind(StrEnum):
    """Stage of a retrieval call that failed."""

    COMPILATION = "compilation"
    RETRIEVAL = "retrieval"
    MATERIALIZATION = "materialization"
    CONNECTION = "connection"
    NOT_FOUND = "not_found"


@final
class DalError(Exception):
    """Base error for all retrieval operations."""

    __slots__ = ("kind", "message", "source")

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.RETRIEVAL,
        source: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.source = source

    def __repr__(self) -> str:
        return f"DalError({self.message!r}, kind={self.kind!r})"
