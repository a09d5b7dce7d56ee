"""In-memory stand-ins for the DynamoDB client.

FakeDynamoClient replays scripted pages and records every call.
FakeTable holds real rows ordered by one key attribute and honors
ExclusiveStartKey and Limit, so resume tokens can be round-tripped.
"""

from typing import Any

from botocore.exceptions import ClientError


def page(*items: dict[str, Any], last: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build a Query/Scan response."""
    response: dict[str, Any] = {"Items": list(items), "Count": len(items)}
    if last is not None:
        response["LastEvaluatedKey"] = last
    return response


def client_error(code: str, operation: str = "Query") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{code} raised"}}, operation)


class FakeDynamoClient:
    """Scripted client: each call pops the next queued page or error."""

    def __init__(self) -> None:
        self.responses: list[dict[str, Any] | BaseException] = []
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.tables: set[str] = set()
        self.closed = False

    def queue(self, *responses: dict[str, Any] | BaseException) -> "FakeDynamoClient":
        self.responses.extend(responses)
        return self

    def query(self, **kwargs: Any) -> dict[str, Any]:
        return self._next("query", kwargs)

    def scan(self, **kwargs: Any) -> dict[str, Any]:
        return self._next("scan", kwargs)

    def describe_table(self, **kwargs: Any) -> dict[str, Any]:
        name = kwargs["TableName"]
        if name not in self.tables:
            raise client_error("ResourceNotFoundException", "DescribeTable")
        return {"Table": {"TableName": name}}

    def close(self) -> None:
        self.closed = True

    def requests(self, operation: str) -> list[dict[str, Any]]:
        return [kwargs for op, kwargs in self.calls if op == operation]

    def _next(self, operation: str, kwargs: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((operation, kwargs))
        if not self.responses:
            return page()
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


class FakeTable:
    """Rows ordered by a string key attribute, paged like DynamoDB Scan."""

    def __init__(self, key: str, rows: list[dict[str, Any]]) -> None:
        self.key = key
        self.rows = sorted(rows, key=lambda row: row[key]["S"])
        self.calls = 0

    def scan(self, **kwargs: Any) -> dict[str, Any]:
        self.calls += 1
        rows = self.rows
        start = kwargs.get("ExclusiveStartKey")
        if start is not None:
            after = start[self.key]["S"]
            rows = [row for row in rows if row[self.key]["S"] > after]

        limit = kwargs.get("Limit") or len(rows)
        selected = rows[:limit]
        last = None
        if len(rows) > limit:
            last = {self.key: selected[-1][self.key]}
        return page(*selected, last=last)

    def query(self, **kwargs: Any) -> dict[str, Any]:
        return self.scan(**kwargs)
