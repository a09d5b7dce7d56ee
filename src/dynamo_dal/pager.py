"""Page driver: runs a compiled request over the backend's paged operation."""

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from dynamo_dal.errors import DalError, ErrorKind
from dynamo_dal.models import PagingMode
from dynamo_dal.protocols import WireItem

logger = logging.getLogger(__name__)

type FetchPage = Callable[..., Mapping[str, Any]]


@dataclass(slots=True)
class PageRun:
    """Rows accumulated by one logical call."""

    rows: list[WireItem] = field(default_factory=list)
    last_evaluated_key: dict[str, Any] | None = None
    pages: int = 0


async def drive_pages(
    fetch: FetchPage,
    request: Mapping[str, Any],
    *,
    start_key: Mapping[str, Any] | None = None,
    mode: PagingMode = PagingMode.SINGLE_PAGE,
) -> PageRun:
    """Fetch pages until the backend reports no continuation.

    In `SINGLE_PAGE` mode only the first page is fetched and its continuation
    marker (if any) is kept in the result. Each call runs in a worker thread,
    so cancelling the awaiting task stops the loop before the next call.

    Raises `DalError` with `ErrorKind.RETRIEVAL` if any backend call fails;
    rows from earlier pages are discarded.
    """
    run = PageRun()
    exclusive_start_key = dict(start_key) if start_key else None
    table = request.get("TableName")

    while True:
        kwargs = dict(request)
        if exclusive_start_key is not None:
            kwargs["ExclusiveStartKey"] = exclusive_start_key

        try:
            response = await asyncio.to_thread(fetch, **kwargs)
        except Exception as e:
            msg = f"Failed to fetch page {run.pages + 1} from '{table}': {e}"
            raise DalError(msg, kind=ErrorKind.RETRIEVAL, source=e) from e

        items: list[WireItem] = list(response.get("Items", []))
        run.rows.extend(items)
        run.pages += 1
        exclusive_start_key = response.get("LastEvaluatedKey") or None
        logger.debug(
            "Fetched page %d from %s: %d items, continuation=%s",
            run.pages,
            table,
            len(items),
            exclusive_start_key is not None,
        )

        if exclusive_start_key is None or mode is PagingMode.SINGLE_PAGE:
            break

    run.last_evaluated_key = exclusive_start_key
    return run
