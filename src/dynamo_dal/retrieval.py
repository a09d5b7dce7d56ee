"""Scan and query operations.

Both operations run the same pipeline: compile the filters, drive the
backend's paged operation, drop rows that fail local checks, materialize the
rest, and derive the resume token for the next call.
"""

from collections.abc import Sequence

from dynamo_dal.compiler import CompiledRequest, compile_request
from dynamo_dal.cursor import SCAN_CURSOR_KEY, next_token, start_key
from dynamo_dal.materialize import materialize
from dynamo_dal.models import Filter, KeyType, Page, Pagination, PagingMode
from dynamo_dal.pager import FetchPage, drive_pages
from dynamo_dal.protocols import DynamoClient


async def scan_items[T](
    client: DynamoClient,
    table: str,
    record_type: type[T],
    filters: Sequence[Filter] = (),
    pagination: Pagination | None = None,
    projection: Sequence[str] = (),
    *,
    mode: PagingMode = PagingMode.SINGLE_PAGE,
    cursor_key: str = SCAN_CURSOR_KEY,
    key_type: KeyType = KeyType.STRING,
) -> Page[T]:
    """Read records from the whole table.

    Every filter is applied as a residual condition. Resume tokens are keyed
    by `cursor_key` in the backend's continuation marker.
    """
    compiled = compile_request(filters, projection=projection)
    return await _retrieve(
        client.scan, compiled, table, record_type, pagination, mode, cursor_key, key_type
    )


async def query_items[T](
    client: DynamoClient,
    table: str,
    partition_key: str,
    record_type: type[T],
    filters: Sequence[Filter] = (),
    pagination: Pagination | None = None,
    projection: Sequence[str] = (),
    *,
    mode: PagingMode = PagingMode.SINGLE_PAGE,
    key_type: KeyType = KeyType.STRING,
) -> Page[T]:
    """Read records from the partition selected by an equality filter.

    `filters` must contain exactly one equality filter on `partition_key`;
    it becomes the key condition. Resume tokens are keyed by `partition_key`.
    """
    compiled = compile_request(filters, partition_key=partition_key, projection=projection)
    return await _retrieve(
        client.query, compiled, table, record_type, pagination, mode, partition_key, key_type
    )


async def _retrieve[T](
    fetch: FetchPage,
    compiled: CompiledRequest,
    table: str,
    record_type: type[T],
    pagination: Pagination | None,
    mode: PagingMode,
    cursor_key: str,
    key_type: KeyType,
) -> Page[T]:
    pagination = pagination or Pagination()

    request = compiled.to_request(table)
    if pagination.limit > 0:
        request["Limit"] = pagination.limit

    run = await drive_pages(
        fetch,
        request,
        start_key=start_key(pagination.token, cursor_key, key_type),
        mode=mode,
    )
    token = next_token(run.last_evaluated_key, cursor_key)

    rows = [compiled.select(row) for row in run.rows if compiled.admits(row)]
    items = materialize(rows, record_type)
    return Page(items=items, pagination=Pagination(token=token, limit=pagination.limit))
