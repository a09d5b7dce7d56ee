"""DynamoDB provider using boto3."""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar, Self

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError
from pydantic import BaseModel

from dynamo_dal.cursor import SCAN_CURSOR_KEY
from dynamo_dal.errors import DalError, ErrorKind
from dynamo_dal.models import Filter, KeyType, KeyValueParams, Page, Pagination, PagingMode
from dynamo_dal.retrieval import query_items, scan_items

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBClient

logger = logging.getLogger(__name__)


class DynamoCredentials(BaseModel, frozen=True):
    """Credentials and connection settings for DynamoDB.

    Unset keys fall back to the default boto3 credential chain.
    """

    region: str = "us-east-1"
    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    endpoint_url: str | None = None
    """Override endpoint (e.g., DynamoDB Local at 'http://localhost:8000')."""

    connect_timeout: float = 5.0
    read_timeout: float = 30.0


class DynamoParams(KeyValueParams, frozen=True):
    """Parameters for DynamoDB operations.

    Inherits `table`, `partition_key`, `projection`, `page_size` and `paging`
    from KeyValueParams.
    """

    cursor_key: str = SCAN_CURSOR_KEY
    """Key attribute carrying the resume token in scan mode."""

    key_type: KeyType = KeyType.STRING
    """Type of the key attribute carrying the resume token."""


class DynamoProvider:
    """DynamoDB provider for partitioned key-value retrieval.

    Implements Provider[DynamoCredentials, DynamoParams] and DataInput.
    """

    __slots__: ClassVar[tuple[str, str]] = ("_client", "_params")

    _client: "DynamoDBClient"
    _params: DynamoParams

    def __init__(self, client: "DynamoDBClient", params: DynamoParams) -> None:
        self._client = client
        self._params = params

    @property
    def params(self) -> DynamoParams:
        return self._params

    @classmethod
    async def connect(cls, credentials: DynamoCredentials, params: DynamoParams) -> Self:
        """Create DynamoDB client and verify the table exists."""
        try:
            client: DynamoDBClient = boto3.client(  # pyright: ignore[reportUnknownMemberType]
                "dynamodb",
                region_name=credentials.region,
                aws_access_key_id=credentials.access_key_id,
                aws_secret_access_key=credentials.secret_access_key,
                aws_session_token=credentials.session_token,
                endpoint_url=credentials.endpoint_url,
                config=Config(
                    connect_timeout=credentials.connect_timeout,
                    read_timeout=credentials.read_timeout,
                ),
            )
            _ = client.describe_table(TableName=params.table)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code == "ResourceNotFoundException":
                msg = f"Table '{params.table}' not found"
                raise DalError(msg, kind=ErrorKind.NOT_FOUND, source=e) from e
            msg = f"Failed to connect to DynamoDB: {e}"
            raise DalError(msg, kind=ErrorKind.CONNECTION, source=e) from e
        except Exception as e:
            msg = f"Failed to connect to DynamoDB: {e}"
            raise DalError(msg, kind=ErrorKind.CONNECTION, source=e) from e

        logger.info("Connected to DynamoDB table %s", params.table)
        return cls(client, params)

    async def disconnect(self) -> None:
        """Close the DynamoDB client."""
        self._client.close()
        logger.info("Disconnected from DynamoDB table %s", self._params.table)

    async def scan[T](
        self,
        record_type: type[T],
        filters: Sequence[Filter] = (),
        pagination: Pagination | None = None,
        *,
        projection: Sequence[str] | None = None,
        mode: PagingMode | None = None,
    ) -> Page[T]:
        """Scan the table, returning one logical page of records.

        Projection, page size and paging mode default to the provider params.
        """
        try:
            return await scan_items(
                self._client,
                self._params.table,
                record_type,
                filters,
                pagination or Pagination(limit=self._params.page_size),
                self._projection(projection),
                mode=mode or self._params.paging,
                cursor_key=self._params.cursor_key,
                key_type=self._params.key_type,
            )
        except DalError as e:
            logger.warning("Scan of %s failed (%s): %s", self._params.table, e.kind, e.message)
            raise

    async def query[T](
        self,
        record_type: type[T],
        filters: Sequence[Filter] = (),
        pagination: Pagination | None = None,
        *,
        partition_key: str | None = None,
        projection: Sequence[str] | None = None,
        mode: PagingMode | None = None,
    ) -> Page[T]:
        """Query one partition, returning one logical page of records.

        `filters` must hold an equality filter on the partition key, which
        defaults to `params.partition_key`.
        """
        key = partition_key or self._params.partition_key
        if key is None:
            msg = f"No partition key configured for table '{self._params.table}'"
            raise DalError(msg, kind=ErrorKind.COMPILATION)

        try:
            return await query_items(
                self._client,
                self._params.table,
                key,
                record_type,
                filters,
                pagination or Pagination(limit=self._params.page_size),
                self._projection(projection),
                mode=mode or self._params.paging,
                key_type=self._params.key_type,
            )
        except DalError as e:
            logger.warning("Query of %s failed (%s): %s", self._params.table, e.kind, e.message)
            raise

    def _projection(self, projection: Sequence[str] | None) -> Sequence[str]:
        if projection is not None:
            return projection
        return self._params.projection or ()


Provider = DynamoProvider
