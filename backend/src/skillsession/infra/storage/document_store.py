from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from skillsession.services.errors import ConditionFailedError, StorageError

Document = Dict[str, Any]
Key = Dict[str, Any]

FILTER_OPS = ("eq", "ne", "contains")


@dataclass(frozen=True)
class Filter:
    """
    A single attribute condition. A scan applies all of its filters (AND); a
    conditional update checks one against the stored item before writing.
    """
    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in FILTER_OPS:
            raise ValueError(f"Unsupported filter op '{self.op}'")

    def matches(self, item: Mapping[str, Any]) -> bool:
        current = item.get(self.field)
        if self.op == "eq":
            return current == self.value
        if self.op == "ne":
            return current != self.value
        if current is None:
            return False
        return self.value in current


@dataclass(frozen=True)
class ScanPage:
    items: List[Document]
    last_key: Optional[Key] = None


class DocumentStore(Protocol):
    def get(self, table: str, key: Key) -> Optional[Document]: ...

    def put(self, table: str, item: Mapping[str, Any]) -> None: ...

    def batch_put(self, table: str, items: Sequence[Mapping[str, Any]]) -> None: ...

    def update(
        self,
        table: str,
        key: Key,
        changes: Mapping[str, Any],
        *,
        condition: Optional[Filter] = None,
    ) -> Document: ...

    def add_to_set(self, table: str, key: Key, field: str, values: Iterable[str]) -> None: ...

    def scan(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        *,
        start_key: Optional[Key] = None,
        limit: Optional[int] = None,
    ) -> ScanPage: ...


def scan_all(
    store: DocumentStore,
    table: str,
    filters: Sequence[Filter] = (),
    *,
    page_size: Optional[int] = None,
) -> List[Document]:
    """Follows the pagination cursor until the store reports no more pages."""
    items: List[Document] = []
    start_key: Optional[Key] = None
    while True:
        page = store.scan(table, filters, start_key=start_key, limit=page_size)
        items.extend(page.items)
        if not page.last_key:
            return items
        start_key = page.last_key


class InMemoryDocumentStore:
    """
    Dict-backed store with DynamoDB-like semantics: `update` upserts, `limit`
    caps the items examined per page (before filtering) and pages are served
    in insertion order.
    """

    def __init__(self, key_fields: Mapping[str, str]) -> None:
        self._lock = Lock()
        self._key_fields = dict(key_fields)
        self._tables: dict[str, dict[Any, Document]] = {}

    def _key_field(self, table: str) -> str:
        try:
            return self._key_fields[table]
        except KeyError:
            raise StorageError("resolve", table, "unknown table") from None

    def _key_value(self, table: str, key: Mapping[str, Any]) -> Any:
        field = self._key_field(table)
        if field not in key:
            raise StorageError("resolve", table, f"key is missing '{field}'")
        return key[field]

    def _rows(self, table: str) -> dict[Any, Document]:
        self._key_field(table)
        return self._tables.setdefault(table, {})

    def get(self, table: str, key: Key) -> Optional[Document]:
        with self._lock:
            row = self._rows(table).get(self._key_value(table, key))
            return _copy(row) if row is not None else None

    def put(self, table: str, item: Mapping[str, Any]) -> None:
        with self._lock:
            self._rows(table)[self._key_value(table, item)] = _copy(item)

    def batch_put(self, table: str, items: Sequence[Mapping[str, Any]]) -> None:
        with self._lock:
            rows = self._rows(table)
            for item in items:
                rows[self._key_value(table, item)] = _copy(item)

    def update(
        self,
        table: str,
        key: Key,
        changes: Mapping[str, Any],
        *,
        condition: Optional[Filter] = None,
    ) -> Document:
        with self._lock:
            rows = self._rows(table)
            value = self._key_value(table, key)
            if condition is not None and not condition.matches(rows.get(value) or {}):
                raise ConditionFailedError(table, dict(key), condition)
            row = rows.setdefault(value, {self._key_field(table): value})
            row.update(_copy(changes))
            return _copy(row)

    def add_to_set(self, table: str, key: Key, field: str, values: Iterable[str]) -> None:
        with self._lock:
            rows = self._rows(table)
            value = self._key_value(table, key)
            row = rows.setdefault(value, {self._key_field(table): value})
            current = set(row.get(field) or ())
            current.update(values)
            row[field] = current

    def scan(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        *,
        start_key: Optional[Key] = None,
        limit: Optional[int] = None,
    ) -> ScanPage:
        with self._lock:
            rows = self._rows(table)
            keys = list(rows)
            offset = 0
            if start_key:
                start_value = self._key_value(table, start_key)
                offset = keys.index(start_value) + 1 if start_value in rows else len(keys)

            end = len(keys) if limit is None else min(len(keys), offset + limit)
            examined = keys[offset:end]
            items = [_copy(rows[k]) for k in examined if all(f.matches(rows[k]) for f in filters)]

            last_key = None
            if end < len(keys) and examined:
                last_key = {self._key_field(table): examined[-1]}
            return ScanPage(items=items, last_key=last_key)


def _copy(item: Mapping[str, Any]) -> Document:
    return {k: set(v) if isinstance(v, set) else v for k, v in item.items()}
