from __future__ import annotations

from skillsession.domain.io import BOOKING_STATUS_FIELD, booking_from_document, booking_to_document
from skillsession.domain.schema import Booking, BookingStatus
from skillsession.infra.storage.document_store import DocumentStore, Filter, scan_all
from skillsession.services.errors import NotFoundError


class BookingRepository:
    def __init__(self, store: DocumentStore, table: str = "bookingdetails", *, page_size: int | None = 100) -> None:
        self._store = store
        self._table = table
        self._page_size = page_size

    def add(self, booking: Booking) -> None:
        self._store.put(self._table, booking_to_document(booking))

    def get(self, booking_id: str) -> Booking:
        document = self._store.get(self._table, {"bookingId": booking_id})
        if document is None:
            raise NotFoundError("Booking", booking_id)
        return booking_from_document(document)

    def set_status(self, booking_id: str, status: BookingStatus) -> None:
        self._store.update(self._table, {"bookingId": booking_id}, {BOOKING_STATUS_FIELD: status.value})

    def list_for_teacher(self, teacher_id: str) -> list[Booking]:
        documents = scan_all(
            self._store,
            self._table,
            [Filter("teacherId", "eq", teacher_id)],
            page_size=self._page_size,
        )
        bookings = [booking_from_document(d) for d in documents]
        return sorted(bookings, key=lambda booking: booking.requested_at)

    def list_pending(self, teacher_id: str, learner_id: str) -> list[Booking]:
        documents = scan_all(
            self._store,
            self._table,
            [
                Filter("teacherId", "eq", teacher_id),
                Filter("learnerId", "eq", learner_id),
                Filter(BOOKING_STATUS_FIELD, "eq", BookingStatus.PENDING.value),
            ],
            page_size=self._page_size,
        )
        return [booking_from_document(d) for d in documents]
