# domain/validate.py
# Input checks run before anything is written to the store.

from __future__ import annotations

from datetime import date, datetime, time
import re
from typing import List, Optional, Sequence

from skillsession.domain.schema import (
    AvailabilityWindow,
    BookingAction,
    Registration,
    UserType,
)


_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


# ------------------ Public API ------------------

class ValidationError(ValueError):
    """Validation error carrying one or more messages."""
    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("\n".join(errors))


def parse_date(value: str) -> Optional[date]:
    """Strict YYYY-MM-DD, or None."""
    if not _DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_time(value: str) -> Optional[time]:
    """Strict 24-hour HH:MM, or None."""
    if not _TIME_RE.match(value):
        return None
    return datetime.strptime(value, "%H:%M").time()


def validate_availability(
    teacher_id: Optional[str],
    day: Optional[str],
    start_time: Optional[str],
    end_time: Optional[str],
    *,
    slot_duration_minutes: int = 60,
    strict_tiling: bool = False,
) -> AvailabilityWindow:
    """
    Builds the AvailabilityWindow for a request or raises ValidationError.

    With strict_tiling the window must split into whole slots; otherwise the
    trailing remainder is left for the slot builder to drop.
    """
    errors: List[str] = []
    _require(teacher_id, "Teacher ID is required", errors)
    _require(day, "Date is required", errors)
    _require(start_time, "Start time is required", errors)
    _require(end_time, "End time is required", errors)
    if errors:
        raise ValidationError(errors)

    start = parse_time(start_time.strip())
    if start is None:
        errors.append("Invalid start time format. Please use 24-hour format (HH:mm)")
    end = parse_time(end_time.strip())
    if end is None:
        errors.append("Invalid end time format. Please use 24-hour format (HH:mm)")
    parsed_day = parse_date(day.strip())
    if parsed_day is None:
        errors.append("Invalid date format. Please use YYYY-MM-DD")
    if errors:
        raise ValidationError(errors)

    window = AvailabilityWindow(
        teacher_id=teacher_id.strip(),
        date=parsed_day,
        start_time=start,
        end_time=end,
    )
    _validate_range(window, slot_duration_minutes, strict_tiling, errors)
    if errors:
        raise ValidationError(errors)
    return window


def validate_booking_request(
    teacher_id: Optional[str],
    learner_id: Optional[str],
    slot_id: Optional[str],
    slot_date: Optional[str],
) -> None:
    errors = _missing_fields(
        [("teacherId", teacher_id), ("learnerId", learner_id), ("slotId", slot_id), ("slotDate", slot_date)]
    )
    if not errors and not _is_iso_datetime(slot_date):
        errors.append("Invalid date format for slotDate")
    if errors:
        raise ValidationError(errors)


def validate_booking_response(
    booking_id: Optional[str],
    teacher_id: Optional[str],
    learner_id: Optional[str],
    slot_id: Optional[str],
    action: Optional[str],
) -> BookingAction:
    errors = _missing_fields(
        [
            ("bookingId", booking_id),
            ("teacherId", teacher_id),
            ("learnerId", learner_id),
            ("slotId", slot_id),
            ("action", action),
        ]
    )
    if errors:
        raise ValidationError(errors)
    try:
        return BookingAction(action)
    except ValueError:
        valid = ", ".join(a.value for a in BookingAction)
        raise ValidationError([f"Invalid action: {action}. Must be one of: {valid}"]) from None


def parse_user_types(raw: Optional[str]) -> frozenset[UserType]:
    """'teacher', 'learner' or both joined by a comma, in either order."""
    if not raw or not raw.strip():
        raise ValidationError(["User type is required"])
    parts = [p.strip().lower() for p in raw.split(",")]
    try:
        types = frozenset(UserType(p) for p in parts)
    except ValueError:
        raise ValidationError([f"Invalid userType: {raw}"]) from None
    if len(types) != len(parts):
        raise ValidationError([f"Invalid userType: {raw}"])
    return types


def validate_registration(registration: Registration) -> None:
    errors = _missing_fields(
        [
            ("email", registration.email),
            ("firstName", registration.first_name),
            ("lastName", registration.last_name),
        ]
    )
    if not registration.user_types:
        errors.append("Missing required field: userType")
    if errors:
        raise ValidationError(errors)


# ------------------ Helpers ------------------

def _require(value: Optional[str], message: str, errors: List[str]) -> None:
    if value is None or not str(value).strip():
        errors.append(message)


def _missing_fields(fields: Sequence[tuple[str, Optional[str]]]) -> List[str]:
    errors: List[str] = []
    for name, value in fields:
        _require(value, f"Missing required field: {name}", errors)
    return errors


def _is_iso_datetime(value: str) -> bool:
    try:
        datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _validate_range(
    window: AvailabilityWindow,
    slot_duration_minutes: int,
    strict_tiling: bool,
    errors: List[str],
) -> None:
    if window.end_time <= window.start_time:
        errors.append("End time must be after start time")
        return

    duration = window.duration_minutes()
    if duration < slot_duration_minutes:
        errors.append(f"Time range must be at least {slot_duration_minutes} minutes")
        return

    if strict_tiling and duration % slot_duration_minutes:
        errors.append(
            f"Time range must be a multiple of {slot_duration_minutes} minutes "
            f"(got {duration} minutes)"
        )
