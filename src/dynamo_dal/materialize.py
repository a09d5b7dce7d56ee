"""Record materialization: wire rows to typed records."""

from collections.abc import Sequence
from functools import lru_cache
from typing import Any

from boto3.dynamodb.types import Binary, TypeDeserializer
from pydantic import TypeAdapter, ValidationError

from dynamo_dal.errors import DalError, ErrorKind
from dynamo_dal.protocols import WireItem

_deserializer = TypeDeserializer()


def _plain(value: Any) -> Any:
    """Unwrap boto3 `Binary` values, recursing into collections."""
    if isinstance(value, Binary):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, set):
        return {_plain(v) for v in value}
    return value


def deserialize_item(item: WireItem) -> dict[str, Any]:
    """Convert a type-tagged row into plain Python values."""
    return {name: _plain(_deserializer.deserialize(value)) for name, value in item.items()}


@lru_cache(maxsize=128)
def _list_adapter(record_type: Any) -> TypeAdapter[list[Any]]:
    return TypeAdapter(list[record_type])


def materialize[T](rows: Sequence[WireItem], record_type: type[T]) -> list[T]:
    """Deserialize rows into instances of `record_type`.

    Attributes unknown to the shape are ignored; fields missing from a row
    take the shape's default. A required field (one without a default)
    missing from a row is a mismatch, so shapes read through a narrow
    projection should declare defaults for every unprojected field. Any
    mismatch fails the whole batch with `ErrorKind.MATERIALIZATION`.
    """
    try:
        plain = [deserialize_item(row) for row in rows]
        return _list_adapter(record_type).validate_python(plain)
    except (ValidationError, TypeError) as e:
        name = getattr(record_type, "__name__", repr(record_type))
        msg = f"Failed to materialize {len(rows)} rows as {name}: {e}"
        raise DalError(msg, kind=ErrorKind.MATERIALIZATION, source=e) from e
