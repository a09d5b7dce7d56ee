"""Root conftest: shared test configuration."""

import os

import pytest

from tests.fake_dynamodb import FakeDynamoClient

# Ensure tests never pick up real AWS credentials
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def fake_client() -> FakeDynamoClient:
    return FakeDynamoClient()
