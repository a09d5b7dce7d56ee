"""Data abstraction layer for partitioned key-value stores."""

from dynamo_dal.compiler import CompiledRequest, compile_request
from dynamo_dal.errors import DalError, ErrorKind
from dynamo_dal.models import (
    Filter,
    KeyType,
    KeyValueParams,
    Operator,
    Page,
    Pagination,
    PagingMode,
)
from dynamo_dal.protocols import DataInput, DynamoClient, Provider
from dynamo_dal.retrieval import query_items, scan_items

__all__ = [
    "CompiledRequest",
    "DalError",
    "DataInput",
    "DynamoClient",
    "ErrorKind",
    "Filter",
    "KeyType",
    "KeyValueParams",
    "Operator",
    "Page",
    "Pagination",
    "PagingMode",
    "Provider",
    "compile_request",
    "query_items",
    "scan_items",
]
