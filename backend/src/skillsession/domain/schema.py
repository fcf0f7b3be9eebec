# domain/schema.py
# Data contract for tutor availability, bookable slots, bookings and profiles.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import FrozenSet, Optional


# ---------- Enums ----------

class SlotStatus(str, Enum):
    OPEN = "OPEN"
    BOOKED = "BOOKED"
    EXPIRED = "EXPIRED"

    def can_transition_to(self, target: SlotStatus) -> bool:
        return target in _SLOT_TRANSITIONS[self]


# EXPIRED is terminal; BOOKED never reopens.
_SLOT_TRANSITIONS: dict[SlotStatus, FrozenSet[SlotStatus]] = {
    SlotStatus.OPEN: frozenset({SlotStatus.BOOKED, SlotStatus.EXPIRED}),
    SlotStatus.BOOKED: frozenset({SlotStatus.EXPIRED}),
    SlotStatus.EXPIRED: frozenset(),
}


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRM = "CONFIRM"
    REJECT = "REJECT"


class BookingAction(str, Enum):
    """Teacher's answer to a booking request."""
    CONFIRM = "CONFIRM"
    REJECT = "REJECT"

    @property
    def resulting_status(self) -> BookingStatus:
        return BookingStatus(self.value)


class UserType(str, Enum):
    TEACHER = "teacher"
    LEARNER = "learner"


# ---------- Availability ----------

@dataclass(frozen=True)
class AvailabilityWindow:
    """A teacher's bookable time range on one calendar date."""
    teacher_id: str
    date: date
    start_time: time
    end_time: time

    @property
    def key(self) -> str:
        return availability_key(self.teacher_id, self.date)

    def duration_minutes(self) -> int:
        start = datetime.combine(self.date, self.start_time)
        end = datetime.combine(self.date, self.end_time)
        return int((end - start).total_seconds() // 60)


@dataclass(frozen=True, order=True)
class Slot:
    """A fixed-duration bookable piece of an availability window."""
    date: date
    start_time: time
    end_time: time
    teacher_id: str
    id: str
    status: SlotStatus = SlotStatus.OPEN


def availability_key(teacher_id: str, day: date) -> str:
    return f"{teacher_id}{day.isoformat()}"


def slot_key(sequence: int, day: date, teacher_id: str) -> str:
    return f"S{sequence}{day.isoformat()}{teacher_id}"


# ---------- Bookings ----------

@dataclass(frozen=True)
class Booking:
    id: str
    teacher_id: str
    learner_id: str
    slot_id: str
    slot_date: str
    status: BookingStatus
    requested_at: datetime


# ---------- Profiles ----------

@dataclass(frozen=True)
class TeacherProfile:
    email: str
    first_name: str
    last_name: str
    mobile_no: str = ""
    skills: str = ""
    exp_years: str = ""
    exp_desc: str = ""


@dataclass(frozen=True)
class LearnerProfile:
    email: str
    first_name: str
    last_name: str
    mobile_no: str = ""
    university: str = ""
    program: str = ""
    courses: str = ""
    start_year: str = ""
    end_year: str = ""


@dataclass(frozen=True)
class UserProfile:
    """Teacher and/or learner profile of one user."""
    email: str
    teacher: Optional[TeacherProfile] = None
    learner: Optional[LearnerProfile] = None


@dataclass(frozen=True)
class Registration:
    email: str
    first_name: str
    last_name: str
    user_types: FrozenSet[UserType] = field(default_factory=frozenset)
    mobile_no: str = ""
    skills: str = ""
    exp_years: str = ""
    exp_desc: str = ""
    university: str = ""
    program: str = ""
    courses: str = ""
    start_year: str = ""
    end_year: str = ""
