from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Callable, Optional
from uuid import uuid4

from skillsession.domain.schema import Booking, BookingAction, BookingStatus, SlotStatus
from skillsession.domain.validate import (
    ValidationError,
    validate_booking_request,
    validate_booking_response,
)
from skillsession.infra.repositories.booking_repository import BookingRepository
from skillsession.infra.repositories.slot_repository import SlotRepository
from skillsession.services.errors import InvalidTransitionError

logger = logging.getLogger(__name__)


def new_booking_id() -> str:
    return f"b{uuid4().hex[:16]}"


class BookingService:
    def __init__(
        self,
        bookings: BookingRepository,
        slots: SlotRepository,
        *,
        id_factory: Callable[[], str] = new_booking_id,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._bookings = bookings
        self._slots = slots
        self._id_factory = id_factory
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def create_booking_request(
        self,
        teacher_id: Optional[str],
        learner_id: Optional[str],
        slot_id: Optional[str],
        slot_date: Optional[str],
    ) -> Booking:
        validate_booking_request(teacher_id, learner_id, slot_id, slot_date)
        booking = Booking(
            id=self._id_factory(),
            teacher_id=teacher_id.strip(),
            learner_id=learner_id.strip(),
            slot_id=slot_id.strip(),
            slot_date=slot_date.strip(),
            status=BookingStatus.PENDING,
            requested_at=self._clock(),
        )
        self._bookings.add(booking)
        logger.info("Booking %s requested for slot %s by %s", booking.id, booking.slot_id, booking.learner_id)
        return booking

    def respond_to_booking(
        self,
        booking_id: Optional[str],
        teacher_id: Optional[str],
        learner_id: Optional[str],
        slot_id: Optional[str],
        action: Optional[str],
    ) -> BookingStatus:
        """
        CONFIRM books the slot and confirms the booking; REJECT only marks the
        booking. The slot is written first, so a failed booking update leaves
        the slot BOOKED.

        The slot write only lands while the stored slot is still OPEN.
        """
        parsed_action = validate_booking_response(booking_id, teacher_id, learner_id, slot_id, action)
        booking = self._bookings.get(booking_id)
        mismatched = [
            f"{name} {given} does not belong to booking {booking.id}"
            for name, given, stored in (
                ("teacherId", teacher_id, booking.teacher_id),
                ("learnerId", learner_id, booking.learner_id),
                ("slotId", slot_id, booking.slot_id),
            )
            if given.strip() != stored
        ]
        if mismatched:
            raise ValidationError(mismatched)
        target = parsed_action.resulting_status
        if booking.status is not BookingStatus.PENDING:
            raise InvalidTransitionError("Booking", booking.id, booking.status.value, target.value)

        if parsed_action is BookingAction.CONFIRM:
            slot = self._slots.get(booking.slot_id)
            if not slot.status.can_transition_to(SlotStatus.BOOKED):
                raise InvalidTransitionError("Slot", slot.id, slot.status.value, SlotStatus.BOOKED.value)
            self._slots.set_status(slot.id, SlotStatus.BOOKED, expected=SlotStatus.OPEN)

        self._bookings.set_status(booking.id, target)
        logger.info("Booking %s moved to %s", booking.id, target.value)
        return target

    def pending_slot_ids(self, teacher_id: str, learner_id: str) -> list[str]:
        slot_ids = [b.slot_id for b in self._bookings.list_pending(teacher_id, learner_id)]
        logger.info("Retrieved %d pending booking slots", len(slot_ids))
        return slot_ids

    def teacher_bookings(self, teacher_id: str) -> list[Booking]:
        bookings = self._bookings.list_for_teacher(teacher_id)
        logger.info("Found %d bookings for teacher %s", len(bookings), teacher_id)
        return bookings
