from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from skillsession.domain.io import SLOT_STATUS_FIELD, slot_from_document, slot_to_document
from skillsession.domain.schema import Slot, SlotStatus
from skillsession.infra.storage.document_store import DocumentStore, Filter, scan_all
from skillsession.services.errors import (
    ConditionFailedError,
    InvalidTransitionError,
    NotFoundError,
    StorageError,
)


class SlotRepository:
    def __init__(self, store: DocumentStore, table: str = "slots", *, page_size: int | None = 100) -> None:
        self._store = store
        self._table = table
        self._page_size = page_size

    def _to_slot(self, document: Mapping[str, Any], operation: str) -> Slot:
        try:
            return slot_from_document(document)
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(operation, self._table, f"unreadable slot {document.get('id')!r}: {exc}") from exc

    def add_many(self, slots: Iterable[Slot]) -> None:
        documents = [slot_to_document(slot) for slot in slots]
        if documents:
            self._store.batch_put(self._table, documents)

    def get(self, slot_id: str) -> Slot:
        document = self._store.get(self._table, {"id": slot_id})
        if document is None:
            raise NotFoundError("Slot", slot_id)
        return self._to_slot(document, "get")

    def list_active(self) -> list[Slot]:
        """Every slot not yet EXPIRED, across all scan pages."""
        documents = scan_all(
            self._store,
            self._table,
            [Filter(SLOT_STATUS_FIELD, "ne", SlotStatus.EXPIRED.value)],
            page_size=self._page_size,
        )
        return [self._to_slot(d, "scan") for d in documents]

    def list_for_teacher(self, teacher_id: str) -> list[Slot]:
        documents = scan_all(
            self._store,
            self._table,
            [Filter("teacherId", "eq", teacher_id)],
            page_size=self._page_size,
        )
        return sorted(self._to_slot(d, "scan") for d in documents)

    def set_status(self, slot_id: str, status: SlotStatus, *, expected: Optional[SlotStatus] = None) -> None:
        """
        With `expected`, the write only happens while the stored status still
        equals it; otherwise InvalidTransitionError names the status found.
        """
        condition = None
        if expected is not None:
            condition = Filter(SLOT_STATUS_FIELD, "eq", expected.value)
        try:
            self._store.update(self._table, {"id": slot_id}, {SLOT_STATUS_FIELD: status.value}, condition=condition)
        except ConditionFailedError:
            current = self._store.get(self._table, {"id": slot_id})
            if current is None:
                raise NotFoundError("Slot", slot_id) from None
            raise InvalidTransitionError(
                "Slot", slot_id, str(current.get(SLOT_STATUS_FIELD)), status.value
            ) from None
