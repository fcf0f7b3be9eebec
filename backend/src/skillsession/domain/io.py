# domain/io.py
# Conversion between domain objects and stored documents.
# Attribute names match the tables the original Lambda handlers wrote.

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Dict, Mapping

from skillsession.domain.schema import (
    AvailabilityWindow,
    Booking,
    BookingStatus,
    LearnerProfile,
    Slot,
    SlotStatus,
    TeacherProfile,
)

Document = Dict[str, Any]

# Slot status is stored under this attribute name.
SLOT_STATUS_FIELD = "slotstatus"
BOOKING_STATUS_FIELD = "bookingStatus"


def format_time(t: time) -> str:
    return t.strftime("%H:%M")


def _time(v: Any) -> time:
    return datetime.strptime(str(v), "%H:%M").time()


def _date(v: Any) -> date:
    return date.fromisoformat(str(v))


def _str(d: Mapping[str, Any], key: str) -> str:
    # Legacy rows may hold numbers (startyear/endyear).
    v = d.get(key)
    return "" if v is None else str(v)


# ---------- Availability ----------

def window_to_document(window: AvailabilityWindow) -> Document:
    return {
        "id": window.key,
        "date": window.date.isoformat(),
        "startTime": format_time(window.start_time),
        "endTime": format_time(window.end_time),
        "teacherId": window.teacher_id,
    }


def window_from_document(d: Mapping[str, Any]) -> AvailabilityWindow:
    return AvailabilityWindow(
        teacher_id=str(d["teacherId"]),
        date=_date(d["date"]),
        start_time=_time(d["startTime"]),
        end_time=_time(d["endTime"]),
    )


# ---------- Slots ----------

def slot_to_document(slot: Slot) -> Document:
    return {
        "id": slot.id,
        "startTime": format_time(slot.start_time),
        "endTime": format_time(slot.end_time),
        SLOT_STATUS_FIELD: slot.status.value,
        "teacherId": slot.teacher_id,
        "date": slot.date.isoformat(),
    }


def slot_from_document(d: Mapping[str, Any]) -> Slot:
    return Slot(
        id=str(d["id"]),
        date=_date(d["date"]),
        start_time=_time(d["startTime"]),
        end_time=_time(d["endTime"]),
        teacher_id=str(d.get("teacherId", "")),
        status=SlotStatus(str(d.get(SLOT_STATUS_FIELD, SlotStatus.OPEN.value))),
    )


# ---------- Bookings ----------

def booking_to_document(booking: Booking) -> Document:
    return {
        "bookingId": booking.id,
        "teacherId": booking.teacher_id,
        "learnerId": booking.learner_id,
        BOOKING_STATUS_FIELD: booking.status.value,
        "slotId": booking.slot_id,
        "requestMadeOn": booking.requested_at.astimezone(timezone.utc).isoformat(),
        "slotDate": booking.slot_date,
    }


def booking_from_document(d: Mapping[str, Any]) -> Booking:
    requested = _str(d, "requestMadeOn").replace("Z", "+00:00")
    return Booking(
        id=str(d["bookingId"]),
        teacher_id=_str(d, "teacherId"),
        learner_id=_str(d, "learnerId"),
        slot_id=_str(d, "slotId"),
        slot_date=_str(d, "slotDate"),
        status=BookingStatus(str(d.get(BOOKING_STATUS_FIELD, BookingStatus.PENDING.value))),
        requested_at=datetime.fromisoformat(requested) if requested else datetime.fromtimestamp(0, timezone.utc),
    )


# ---------- Profiles ----------

def teacher_to_document(p: TeacherProfile) -> Document:
    return {
        "id": p.email,
        "firstName": p.first_name,
        "lastName": p.last_name,
        "mobileNo": p.mobile_no,
        "skills": p.skills,
        "expyears": p.exp_years,
        "expdesc": p.exp_desc,
    }


def teacher_from_document(d: Mapping[str, Any]) -> TeacherProfile:
    return TeacherProfile(
        email=str(d["id"]),
        first_name=_str(d, "firstName"),
        last_name=_str(d, "lastName"),
        mobile_no=_str(d, "mobileNo"),
        skills=_str(d, "skills"),
        exp_years=_str(d, "expyears"),
        exp_desc=_str(d, "expdesc"),
    )


def learner_to_document(p: LearnerProfile) -> Document:
    return {
        "id": p.email,
        "firstName": p.first_name,
        "lastName": p.last_name,
        "mobileNo": p.mobile_no,
        "university": p.university,
        "program": p.program,
        "courses": p.courses,
        "startyear": p.start_year,
        "endyear": p.end_year,
    }


def learner_from_document(d: Mapping[str, Any]) -> LearnerProfile:
    return LearnerProfile(
        email=str(d["id"]),
        first_name=_str(d, "firstName"),
        last_name=_str(d, "lastName"),
        mobile_no=_str(d, "mobileNo"),
        university=_str(d, "university"),
        program=_str(d, "program"),
        courses=_str(d, "courses"),
        start_year=_str(d, "startyear"),
        end_year=_str(d, "endyear"),
    )
