"""Predicate compiler: filter lists to DynamoDB expressions.

Turns a flat AND-list of filters, an optional partition key name and a
projection list into a `CompiledRequest`. Conditions are rendered with
boto3's `ConditionExpressionBuilder`, so attribute names and values always go
through `#n`/`:v` placeholders; projection paths use one `#p` placeholder per
segment, so `a.b` names the same nested attribute in both.

In query mode (a partition key is given) exactly one equality filter on the
partition key must be present; it becomes the key condition and every other
filter becomes part of the residual `FilterExpression`.
"""

from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from functools import reduce
from operator import and_, or_
from typing import Any, assert_never

from boto3.dynamodb.conditions import Attr, ConditionBase, ConditionExpressionBuilder, Key
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from boto3.exceptions import Boto3Error
from pydantic import BaseModel, Field

from dynamo_dal.errors import DalError, ErrorKind
from dynamo_dal.models import Filter, Operator, ScalarValue
from dynamo_dal.protocols import WireItem

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


@dataclass(frozen=True, slots=True)
class SubsetCheck:
    """Row-level check that an attribute's elements all lie in `allowed`.

    DynamoDB has no subset operator, so `MATCH_SUBSET` is evaluated locally
    on every returned row.
    """

    name: str
    allowed: frozenset[Any]

    def matches(self, item: WireItem) -> bool:
        head, *rest = self.name.split(".")
        if head not in item:
            return False
        value: Any = _deserializer.deserialize(item[head])
        for segment in rest:
            if not isinstance(value, dict) or segment not in value:
                return False
            value = value[segment]

        if isinstance(value, dict):
            return False
        elements = value if isinstance(value, (set, list)) else [value]
        return all(isinstance(el, Hashable) and el in self.allowed for el in elements)


class CompiledRequest(BaseModel, frozen=True):
    """Backend-native rendering of a filter/projection request."""

    key_condition: str | None = None
    """KeyConditionExpression (query mode only)."""

    filter_expression: str | None = None
    """Residual FilterExpression. None when no residual filters exist."""

    projection: str | None = None
    """ProjectionExpression. None retrieves all attributes."""

    names: dict[str, str] = Field(default_factory=dict)
    """ExpressionAttributeNames."""

    values: dict[str, dict[str, Any]] = Field(default_factory=dict)
    """ExpressionAttributeValues in wire format."""

    local_checks: tuple[SubsetCheck, ...] = ()
    """Checks applied to each returned row before materialization."""

    selection: tuple[str, ...] = ()
    """Caller projection to cut rows back to. Set only when local checks widened it."""

    def to_request(self, table: str) -> dict[str, Any]:
        """Render boto3 keyword arguments for Query/Scan, omitting empty parts."""
        request: dict[str, Any] = {"TableName": table}
        if self.key_condition is not None:
            request["KeyConditionExpression"] = self.key_condition
        if self.filter_expression is not None:
            request["FilterExpression"] = self.filter_expression
        if self.projection is not None:
            request["ProjectionExpression"] = self.projection
        if self.names:
            request["ExpressionAttributeNames"] = dict(self.names)
        if self.values:
            request["ExpressionAttributeValues"] = dict(self.values)
        return request

    def admits(self, item: WireItem) -> bool:
        """Return True if the row passes every local check."""
        return all(check.matches(item) for check in self.local_checks)

    def select(self, item: WireItem) -> WireItem:
        """Drop attributes fetched only for local checks."""
        if not self.selection:
            return item
        return _prune(item, _path_tree(self.selection))


def compile_request(
    filters: Sequence[Filter],
    *,
    partition_key: str | None = None,
    projection: Sequence[str] = (),
) -> CompiledRequest:
    """Compile filters and projection into a `CompiledRequest`.

    Passing `partition_key` selects query mode. Raises `DalError` with
    `ErrorKind.COMPILATION` on malformed input.
    """
    _validate_names(filters, partition_key, projection)

    key_filter: Filter | None = None
    fragments: list[ConditionBase] = []
    checks: list[SubsetCheck] = []

    for f in filters:
        if partition_key is not None and f.name == partition_key and f.op.is_equality:
            if key_filter is not None:
                msg = f"Multiple equality filters on partition key '{partition_key}'"
                raise DalError(msg, kind=ErrorKind.COMPILATION)
            if f.is_set:
                msg = f"Partition key '{partition_key}' must be compared to a scalar value"
                raise DalError(msg, kind=ErrorKind.COMPILATION)
            key_filter = f
            continue

        fragment, check = _fragment(f)
        fragments.append(fragment)
        if check is not None:
            checks.append(check)

    if partition_key is not None and key_filter is None:
        msg = f"Query requires an equality filter on partition key '{partition_key}'"
        raise DalError(msg, kind=ErrorKind.COMPILATION)

    builder = ConditionExpressionBuilder()
    names: dict[str, str] = {}
    raw_values: dict[str, Any] = {}
    key_condition: str | None = None
    filter_expression: str | None = None

    try:
        if key_filter is not None:
            built = builder.build_expression(
                Key(key_filter.name).eq(key_filter.value), is_key_condition=True
            )
            key_condition = built.condition_expression
            names.update(built.attribute_name_placeholders)
            raw_values.update(built.attribute_value_placeholders)

        if fragments:
            built = builder.build_expression(reduce(and_, fragments))
            filter_expression = built.condition_expression
            names.update(built.attribute_name_placeholders)
            raw_values.update(built.attribute_value_placeholders)

        values = {ph: _serializer.serialize(v) for ph, v in raw_values.items()}
    except (Boto3Error, TypeError, ValueError) as e:
        msg = f"Failed to build expression: {e}"
        raise DalError(msg, kind=ErrorKind.COMPILATION, source=e) from e

    projection_expr: str | None = None
    selection: tuple[str, ...] = ()
    if projection:
        requested = list(dict.fromkeys(projection))
        selected = list(requested)
        for check in checks:
            if not any(_covers(path, check.name) for path in selected):
                selected = [path for path in selected if not _covers(check.name, path)]
                selected.append(check.name)
        if selected != requested:
            selection = tuple(requested)
        projection_expr = _projection_expression(selected, names)

    return CompiledRequest(
        key_condition=key_condition,
        filter_expression=filter_expression,
        projection=projection_expr,
        names=names,
        values=values,
        local_checks=tuple(checks),
        selection=selection,
    )


def _validate_names(
    filters: Sequence[Filter],
    partition_key: str | None,
    projection: Sequence[str],
) -> None:
    if partition_key is not None and not partition_key:
        msg = "Partition key name must not be empty"
        raise DalError(msg, kind=ErrorKind.COMPILATION)
    for i, f in enumerate(filters):
        if not f.name:
            msg = f"Filter {i} has an empty attribute name"
            raise DalError(msg, kind=ErrorKind.COMPILATION)
    for i, name in enumerate(projection):
        if not all(name.split(".")):
            msg = f"Projection entry {i} is an empty attribute name"
            raise DalError(msg, kind=ErrorKind.COMPILATION)


def _fragment(f: Filter) -> tuple[ConditionBase, SubsetCheck | None]:
    """Build the condition for one residual filter."""
    attr = Attr(f.name)
    if f.op is Operator.EQUAL_TO or f.op is Operator.MATCH_EXACT:
        return attr.eq(f.value), None
    if f.op is Operator.LESS_THAN:
        return attr.lt(_scalar(f)), None
    if f.op is Operator.GREATER_THAN:
        return attr.gt(_scalar(f)), None
    if f.op is Operator.MATCH_ANY:
        return reduce(or_, (attr.contains(v) for v in _elements(f))), None
    if f.op is Operator.MATCH_SUPERSET:
        return reduce(and_, (attr.contains(v) for v in _elements(f))), None
    if f.op is Operator.MATCH_SUBSET:
        check = SubsetCheck(name=f.name, allowed=frozenset(_elements(f)))
        return attr.exists(), check
    assert_never(f.op)


def _scalar(f: Filter) -> ScalarValue:
    if isinstance(f.value, frozenset):
        msg = f"Operator '{f.op}' on '{f.name}' requires a scalar value"
        raise DalError(msg, kind=ErrorKind.COMPILATION)
    return f.value


def _elements(f: Filter) -> list[ScalarValue]:
    """Elements of a set value in a stable order; a scalar is a one-element set."""
    if not isinstance(f.value, frozenset):
        return [f.value]
    if not f.value:
        msg = f"Operator '{f.op}' on '{f.name}' requires a non-empty set"
        raise DalError(msg, kind=ErrorKind.COMPILATION)
    return sorted(f.value, key=repr)


def _covers(outer: str, inner: str) -> bool:
    """True if projecting document path `outer` also returns `inner`."""
    return inner == outer or inner.startswith(f"{outer}.")


def _projection_expression(paths: Sequence[str], names: dict[str, str]) -> str:
    """Render projection paths with one `#p` placeholder per distinct segment."""
    placeholders: dict[str, str] = {}
    rendered = []
    for path in paths:
        segments = []
        for segment in path.split("."):
            if segment not in placeholders:
                placeholders[segment] = f"#p{len(placeholders)}"
            segments.append(placeholders[segment])
        rendered.append(".".join(segments))
    names.update((ph, segment) for segment, ph in placeholders.items())
    return ", ".join(rendered)


def _path_tree(paths: Sequence[str]) -> dict[str, Any]:
    """Nest document paths by segment; a `None` leaf keeps the whole attribute."""
    tree: dict[str, Any] = {}
    for path in paths:
        *parents, leaf = path.split(".")
        node = tree
        for segment in parents:
            child = node.setdefault(segment, {})
            if child is None:
                break
            node = child
        else:
            node[leaf] = None
    return tree


def _prune(item: WireItem, tree: dict[str, Any]) -> WireItem:
    kept: WireItem = {}
    for name, sub in tree.items():
        if name not in item:
            continue
        value = item[name]
        if sub is None:
            kept[name] = value
        elif "M" in value:
            kept[name] = {"M": _prune(value["M"], sub)}
    return kept
