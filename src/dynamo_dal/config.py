"""Environment-driven settings via pydantic-settings.

Every setting reads from a `DYNAMO_DAL_`-prefixed environment variable (or a
`.env` file). Unset AWS keys fall through to the default boto3 credential
chain.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dynamo_dal.models import PagingMode
from dynamo_dal.providers.dynamodb import DynamoCredentials, DynamoParams


class Settings(BaseSettings):
    """Connection and retrieval defaults from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DYNAMO_DAL_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # Connection
    region: str = "us-east-1"
    endpoint_url: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    connect_timeout: float = 5.0
    read_timeout: float = 30.0

    # Retrieval
    page_size: int = Field(default=0, ge=0)
    paging_mode: PagingMode = PagingMode.SINGLE_PAGE

    def credentials(self) -> DynamoCredentials:
        return DynamoCredentials(
            region=self.region,
            access_key_id=self.access_key_id,
            secret_access_key=self.secret_access_key,
            session_token=self.session_token,
            endpoint_url=self.endpoint_url,
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
        )

    def params(self, table: str, partition_key: str | None = None) -> DynamoParams:
        """Table params seeded with the configured page size and paging mode."""
        return DynamoParams(
            table=table,
            partition_key=partition_key,
            page_size=self.page_size,
            paging=self.paging_mode,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
