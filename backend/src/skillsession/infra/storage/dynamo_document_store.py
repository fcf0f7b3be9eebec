from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from functools import reduce
import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

import boto3
from boto3.dynamodb.conditions import Attr, ConditionBase
from botocore.exceptions import BotoCoreError, ClientError

from skillsession.infra.storage.document_store import Document, Filter, Key, ScanPage
from skillsession.services.errors import ConditionFailedError, StorageError

logger = logging.getLogger(__name__)


def build_dynamodb_resource(region: str, endpoint_url: str | None = None) -> Any:
    return boto3.resource("dynamodb", region_name=region, endpoint_url=endpoint_url)


def _condition(f: Filter) -> ConditionBase:
    attr = Attr(f.field)
    if f.op == "eq":
        return attr.eq(f.value)
    if f.op == "ne":
        return attr.ne(f.value)
    return attr.contains(f.value)


class DynamoDocumentStore:
    """
    DocumentStore over a boto3 DynamoDB resource. The resource layer handles
    the attribute-value encoding, so items cross this boundary as plain dicts.
    """

    def __init__(self, resource: Any) -> None:
        self._resource = resource

    def _table(self, name: str) -> Any:
        return self._resource.Table(name)

    @contextmanager
    def _translate_errors(self, operation: str, table: str) -> Iterator[None]:
        try:
            yield
        except (BotoCoreError, ClientError) as exc:
            logger.exception("DynamoDB %s on %s failed", operation, table)
            raise StorageError(operation, table, str(exc)) from exc

    def get(self, table: str, key: Key) -> Optional[Document]:
        with self._translate_errors("get_item", table):
            response = self._table(table).get_item(Key=dict(key))
        return response.get("Item")

    def put(self, table: str, item: Mapping[str, Any]) -> None:
        with self._translate_errors("put_item", table):
            self._table(table).put_item(Item=dict(item))

    def batch_put(self, table: str, items: Sequence[Mapping[str, Any]]) -> None:
        if not items:
            return
        # batch_writer chunks into 25-item requests and resends unprocessed items
        with self._translate_errors("batch_write_item", table):
            with self._table(table).batch_writer() as batch:
                for item in items:
                    batch.put_item(Item=dict(item))

    def update(
        self,
        table: str,
        key: Key,
        changes: Mapping[str, Any],
        *,
        condition: Optional[Filter] = None,
    ) -> Document:
        if not changes:
            return self.get(table, key) or dict(key)

        names: dict[str, str] = {}
        values: dict[str, Any] = {}
        assignments: list[str] = []
        for i, (field, value) in enumerate(changes.items()):
            names[f"#f{i}"] = field
            values[f":v{i}"] = value
            assignments.append(f"#f{i} = :v{i}")

        kwargs: dict[str, Any] = {}
        if condition is not None:
            kwargs["ConditionExpression"] = _condition(condition)

        with self._translate_errors("update_item", table):
            try:
                response = self._table(table).update_item(
                    Key=dict(key),
                    UpdateExpression="SET " + ", ".join(assignments),
                    ExpressionAttributeNames=names,
                    ExpressionAttributeValues=values,
                    ReturnValues="ALL_NEW",
                    **kwargs,
                )
            except ClientError as exc:
                if exc.response.get("Error", {}).get("Code") != "ConditionalCheckFailedException":
                    raise
                raise ConditionFailedError(table, dict(key), condition) from exc
        return response.get("Attributes", {})

    def add_to_set(self, table: str, key: Key, field: str, values: Iterable[str]) -> None:
        members = set(values)
        if not members:
            return
        with self._translate_errors("update_item", table):
            self._table(table).update_item(
                Key=dict(key),
                UpdateExpression="ADD #f :v",
                ExpressionAttributeNames={"#f": field},
                ExpressionAttributeValues={":v": members},
            )

    def scan(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        *,
        start_key: Optional[Key] = None,
        limit: Optional[int] = None,
    ) -> ScanPage:
        kwargs: dict[str, Any] = {}
        if filters:
            kwargs["FilterExpression"] = reduce(lambda a, b: a & b, (_condition(f) for f in filters))
        if start_key:
            kwargs["ExclusiveStartKey"] = start_key
        if limit is not None:
            kwargs["Limit"] = limit

        with self._translate_errors("scan", table):
            response = self._table(table).scan(**kwargs)
        return ScanPage(items=response.get("Items", []), last_key=response.get("LastEvaluatedKey"))
