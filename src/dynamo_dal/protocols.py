"""Core protocols for the backend client and data providers."""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, Self, TypeVar, runtime_checkable

from dynamo_dal.models import Filter, Page, Pagination

T = TypeVar("T")
Cred_contra = TypeVar("Cred_contra", contravariant=True)
Params_contra = TypeVar("Params_contra", contravariant=True)

# Wire-format row: attribute name -> type-tagged value ({"S": "x"}, {"N": "1"}, ...)
type WireItem = dict[str, dict[str, Any]]


@runtime_checkable
class DynamoClient(Protocol):
    """Single-page retrieval operations of a DynamoDB client.

    A `boto3.client("dynamodb")` satisfies this protocol.
    """

    def query(self, **kwargs: Any) -> Mapping[str, Any]:
        """Run one Query page and return the raw response."""
        ...

    def scan(self, **kwargs: Any) -> Mapping[str, Any]:
        """Run one Scan page and return the raw response."""
        ...


@runtime_checkable
class DataInput(Protocol):
    """Protocol for reading typed records from a partitioned table."""

    async def scan(
        self,
        record_type: type[T],
        filters: Sequence[Filter] = (),
        pagination: Pagination | None = None,
    ) -> Page[T]:
        """Read records from the whole key space."""
        ...

    async def query(
        self,
        record_type: type[T],
        filters: Sequence[Filter] = (),
        pagination: Pagination | None = None,
    ) -> Page[T]:
        """Read records from the partition selected by a key-equality filter."""
        ...


@runtime_checkable
class Provider(Protocol[Cred_contra, Params_contra]):
    """Protocol for provider lifecycle management."""

    @classmethod
    async def connect(cls, credentials: Cred_contra, params: Params_contra) -> Self:
        """Establish connection to the external service."""
        ...

    async def disconnect(self) -> None:
        """Release resources and close connections."""
        ...
