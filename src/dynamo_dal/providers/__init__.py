"""Provider implementations for external services.

Each provider module exports a `Provider` class alias for the main provider class,
along with its credentials and params types.

Available providers:
- dynamodb: Amazon DynamoDB via boto3
"""

from dynamo_dal.providers import dynamodb

__all__ = [
    "dynamodb",
]
