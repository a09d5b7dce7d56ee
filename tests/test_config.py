"""Unit Tests: Settings: environment-driven configuration."""

import pytest

from dynamo_dal import PagingMode
from dynamo_dal.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    monkeypatch.delenv("DYNAMO_DAL_REGION", raising=False)

    settings = Settings(_env_file=None)

    assert settings.region == "us-east-1"
    assert settings.page_size == 0
    assert settings.paging_mode is PagingMode.SINGLE_PAGE


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("DYNAMO_DAL_REGION", "eu-central-1")
    monkeypatch.setenv("DYNAMO_DAL_ENDPOINT_URL", "http://localhost:8000")
    monkeypatch.setenv("DYNAMO_DAL_PAGE_SIZE", "50")
    monkeypatch.setenv("DYNAMO_DAL_PAGING_MODE", "drain_all")

    settings = Settings(_env_file=None)

    assert settings.region == "eu-central-1"
    assert settings.endpoint_url == "http://localhost:8000"
    assert settings.page_size == 50
    assert settings.paging_mode is PagingMode.DRAIN_ALL


def test_credentials_and_params(monkeypatch):
    monkeypatch.setenv("DYNAMO_DAL_ACCESS_KEY_ID", "AKIA")
    monkeypatch.setenv("DYNAMO_DAL_PAGE_SIZE", "10")

    settings = Settings(_env_file=None)
    credentials = settings.credentials()
    params = settings.params("Bundles", partition_key="ID")

    assert credentials.access_key_id == "AKIA"
    assert credentials.read_timeout == settings.read_timeout
    assert params.table == "Bundles"
    assert params.partition_key == "ID"
    assert params.page_size == 10


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
