from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from skillsession.infra.db.models import DocumentModel
from skillsession.infra.storage.document_store import Document, Filter, Key, ScanPage
from skillsession.services.errors import ConditionFailedError, StorageError

logger = logging.getLogger(__name__)


def _to_json(item: Mapping[str, Any]) -> Document:
    # JSON has no set type
    return {k: sorted(v) if isinstance(v, (set, frozenset)) else v for k, v in item.items()}


class SqlDocumentStore:
    """Documents kept as JSON rows of a single `documents` table."""

    def __init__(self, session_factory: sessionmaker[Session], key_fields: Mapping[str, str]) -> None:
        self._session_factory = session_factory
        self._key_fields = dict(key_fields)

    def _key_value(self, table: str, key: Mapping[str, Any]) -> str:
        field = self._key_fields.get(table)
        if field is None:
            raise StorageError("resolve", table, "unknown table")
        if field not in key:
            raise StorageError("resolve", table, f"key is missing '{field}'")
        return str(key[field])

    @contextmanager
    def _session(self, operation: str, table: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("SQL %s on %s failed", operation, table)
            raise StorageError(operation, table, str(exc)) from exc
        finally:
            db.close()

    def get(self, table: str, key: Key) -> Optional[Document]:
        value = self._key_value(table, key)
        with self._session("get", table) as db:
            row = db.get(DocumentModel, (table, value))
            return dict(row.body) if row is not None else None

    def put(self, table: str, item: Mapping[str, Any]) -> None:
        self.batch_put(table, [item])

    def batch_put(self, table: str, items: Sequence[Mapping[str, Any]]) -> None:
        with self._session("batch_put", table) as db:
            for item in items:
                db.merge(DocumentModel(table_name=table, key=self._key_value(table, item), body=_to_json(item)))

    def update(
        self,
        table: str,
        key: Key,
        changes: Mapping[str, Any],
        *,
        condition: Optional[Filter] = None,
    ) -> Document:
        value = self._key_value(table, key)
        with self._session("update", table) as db:
            row = db.get(DocumentModel, (table, value), with_for_update=condition is not None)
            if condition is not None and not condition.matches(row.body if row is not None else {}):
                raise ConditionFailedError(table, dict(key), condition)
            if row is None:
                row = DocumentModel(table_name=table, key=value, body={self._key_fields[table]: key[self._key_fields[table]]})
                db.add(row)
            # reassign so the JSON column is flagged dirty
            row.body = {**row.body, **_to_json(changes)}
            return dict(row.body)

    def add_to_set(self, table: str, key: Key, field: str, values: Iterable[str]) -> None:
        value = self._key_value(table, key)
        with self._session("add_to_set", table) as db:
            row = db.get(DocumentModel, (table, value))
            if row is None:
                row = DocumentModel(table_name=table, key=value, body={self._key_fields[table]: key[self._key_fields[table]]})
                db.add(row)
            current = set(row.body.get(field) or ())
            current.update(values)
            row.body = {**row.body, field: sorted(current)}

    def scan(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        *,
        start_key: Optional[Key] = None,
        limit: Optional[int] = None,
    ) -> ScanPage:
        stmt = select(DocumentModel).where(DocumentModel.table_name == table).order_by(DocumentModel.key.asc())
        if start_key:
            stmt = stmt.where(DocumentModel.key > self._key_value(table, start_key))
        if limit is not None:
            stmt = stmt.limit(limit)

        with self._session("scan", table) as db:
            rows = db.scalars(stmt).all()
            items = [dict(row.body) for row in rows if all(f.matches(row.body) for f in filters)]
            last_key = None
            if limit is not None and len(rows) == limit:
                last_key = {self._key_fields[table]: rows[-1].key}
            return ScanPage(items=items, last_key=last_key)
