from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from skillsession.api.deps import get_booking_service
from skillsession.api.schemas import (
    BookingActionRequest,
    BookingActionResponse,
    BookingCreateRequest,
    BookingCreateResponse,
    BookingResponse,
    TeacherBookingsResponse,
)
from skillsession.domain.schema import BookingStatus
from skillsession.services.booking_service import BookingService

router = APIRouter(tags=["bookings"])

_ACTION_MESSAGES = {
    BookingStatus.CONFIRM: "Booking confirmed successfully",
    BookingStatus.REJECT: "Booking rejected successfully",
}


@router.post("/bookings", response_model=BookingCreateResponse)
def create_booking_request(
    body: BookingCreateRequest,
    service: BookingService = Depends(get_booking_service),
) -> BookingCreateResponse:
    booking = service.create_booking_request(body.teacher_id, body.learner_id, body.slot_id, body.slot_date)
    return BookingCreateResponse(
        success=True,
        message="Booking request has been sent to the teacher for approval",
        booking_id=booking.id,
    )


@router.post("/bookings/{booking_id}/response", response_model=BookingActionResponse)
def respond_to_booking(
    booking_id: str,
    body: BookingActionRequest,
    service: BookingService = Depends(get_booking_service),
) -> BookingActionResponse:
    outcome = service.respond_to_booking(booking_id, body.teacher_id, body.learner_id, body.slot_id, body.action)
    return BookingActionResponse(success=True, message=_ACTION_MESSAGES[outcome])


@router.get("/bookings/pending", response_model=list[str])
def pending_booking_slots(
    teacher_id: str = Query(alias="teacherId", min_length=1),
    learner_id: str = Query(alias="learnerId", min_length=1),
    service: BookingService = Depends(get_booking_service),
) -> list[str]:
    return service.pending_slot_ids(teacher_id, learner_id)


@router.get("/teachers/{teacher_id}/bookings", response_model=TeacherBookingsResponse)
def teacher_bookings(
    teacher_id: str,
    service: BookingService = Depends(get_booking_service),
) -> TeacherBookingsResponse:
    bookings = service.teacher_bookings(teacher_id)
    return TeacherBookingsResponse(bookings=[BookingResponse.from_booking(b) for b in bookings])
