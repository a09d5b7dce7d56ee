"""Resume-token handling.

The backend paginates with a key-shaped marker (`LastEvaluatedKey` out,
`ExclusiveStartKey` in). Callers only ever see a single opaque string: the
value stored under one key attribute of that marker (base64 text for binary
keys). Query mode keys the marker by the partition key name, scan mode by a
synthetic key name.
"""

import base64
from collections.abc import Mapping
from typing import Any

from dynamo_dal.errors import DalError, ErrorKind
from dynamo_dal.models import KeyType

SCAN_CURSOR_KEY = "Key"


def start_key(
    token: str,
    key_name: str,
    key_type: KeyType = KeyType.STRING,
) -> dict[str, dict[str, str | bytes]] | None:
    """Wrap a resume token into an `ExclusiveStartKey`. Empty token means none."""
    if not token:
        return None
    if key_type is KeyType.BINARY:
        try:
            raw = base64.b64decode(token, validate=True)
        except ValueError as e:
            msg = f"Resume token for '{key_name}' is not valid base64"
            raise DalError(msg, kind=ErrorKind.RETRIEVAL, source=e) from e
        return {key_name: {key_type.value: raw}}
    return {key_name: {key_type.value: token}}


def next_token(marker: Mapping[str, Any] | None, key_name: str) -> str:
    """Extract the resume token from a `LastEvaluatedKey`.

    Returns an empty string when the backend reported no continuation.
    """
    if not marker:
        return ""
    attribute = marker.get(key_name)
    if not isinstance(attribute, Mapping):
        msg = f"Continuation marker has no '{key_name}' attribute"
        raise DalError(msg, kind=ErrorKind.RETRIEVAL)

    for key_type in KeyType:
        value = attribute.get(key_type.value)
        if isinstance(value, str):
            return value
        if isinstance(value, (bytes, bytearray)):
            return base64.b64encode(value).decode("ascii")

    msg = f"Continuation marker attribute '{key_name}' is not a scalar key"
    raise DalError(msg, kind=ErrorKind.RETRIEVAL)
