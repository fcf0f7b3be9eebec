from __future__ import annotations

from datetime import date

from skillsession.domain.io import window_from_document, window_to_document
from skillsession.domain.schema import AvailabilityWindow, availability_key
from skillsession.infra.storage.document_store import DocumentStore
from skillsession.services.errors import NotFoundError


class AvailabilityRepository:
    def __init__(self, store: DocumentStore, table: str = "availability") -> None:
        self._store = store
        self._table = table

    def exists(self, teacher_id: str, day: date) -> bool:
        return self._store.get(self._table, {"id": availability_key(teacher_id, day)}) is not None

    def get(self, teacher_id: str, day: date) -> AvailabilityWindow:
        key = availability_key(teacher_id, day)
        document = self._store.get(self._table, {"id": key})
        if document is None:
            raise NotFoundError("Availability", key)
        return window_from_document(document)

    def add(self, window: AvailabilityWindow) -> None:
        self._store.put(self._table, window_to_document(window))
