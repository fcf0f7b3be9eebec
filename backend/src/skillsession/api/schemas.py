from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from skillsession.domain.io import format_time
from skillsession.domain.schema import Booking, LearnerProfile, Slot, TeacherProfile, UserProfile

# Request field aliases accepted from older clients. Canonical name first.
TEACHER_ID = AliasChoices("teacherId", "teacher_id", "id", "tutorId", "tutorid", "userid")
LEARNER_ID = AliasChoices("learnerId", "learner_id", "studentId", "studentid")
SLOT_ID = AliasChoices("slotId", "slot_id", "slotid")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    status: str


# ---------- Availability / slots ----------

class AvailabilityCreateRequest(BaseModel):
    teacher_id: Optional[str] = Field(default=None, validation_alias=TEACHER_ID)
    date: Optional[str] = None
    start_time: Optional[str] = Field(default=None, validation_alias=AliasChoices("startTime", "start_time"))
    end_time: Optional[str] = Field(default=None, validation_alias=AliasChoices("endTime", "end_time"))


class AvailabilityCreateResponse(CamelModel):
    success: bool
    message: str
    slots_created: int
    item_found: bool = False


class SlotResponse(CamelModel):
    id: str
    date: str
    start_time: str
    end_time: str
    status: str
    teacher_id: str

    @classmethod
    def from_slot(cls, slot: Slot) -> SlotResponse:
        return cls(
            id=slot.id,
            date=slot.date.isoformat(),
            start_time=format_time(slot.start_time),
            end_time=format_time(slot.end_time),
            status=slot.status.value,
            teacher_id=slot.teacher_id,
        )


# ---------- Bookings ----------

class BookingCreateRequest(BaseModel):
    teacher_id: Optional[str] = Field(default=None, validation_alias=TEACHER_ID)
    learner_id: Optional[str] = Field(default=None, validation_alias=LEARNER_ID)
    slot_id: Optional[str] = Field(default=None, validation_alias=SLOT_ID)
    slot_date: Optional[str] = Field(default=None, validation_alias=AliasChoices("slotDate", "slot_date", "slotdate"))


class BookingCreateResponse(CamelModel):
    success: bool
    message: str
    booking_id: str


class BookingActionRequest(BaseModel):
    teacher_id: Optional[str] = Field(default=None, validation_alias=TEACHER_ID)
    learner_id: Optional[str] = Field(default=None, validation_alias=LEARNER_ID)
    slot_id: Optional[str] = Field(default=None, validation_alias=SLOT_ID)
    action: Optional[str] = None


class BookingActionResponse(CamelModel):
    success: bool
    message: str


class BookingResponse(CamelModel):
    booking_id: str
    teacher_id: str
    learner_id: str
    slot_id: str
    booking_status: str
    slot_date: str
    request_made_on: datetime

    @classmethod
    def from_booking(cls, booking: Booking) -> BookingResponse:
        return cls(
            booking_id=booking.id,
            teacher_id=booking.teacher_id,
            learner_id=booking.learner_id,
            slot_id=booking.slot_id,
            booking_status=booking.status.value,
            slot_date=booking.slot_date,
            request_made_on=booking.requested_at,
        )


class TeacherBookingsResponse(BaseModel):
    bookings: list[BookingResponse]


# ---------- Profiles ----------

Year = Union[str, int, None]


class RegistrationRequest(BaseModel):
    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("firstName", "first_name"))
    last_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("lastName", "last_name"))
    user_type: Optional[str] = Field(default=None, validation_alias=AliasChoices("userType", "user_type"))
    mobile_no: Optional[str] = Field(default=None, validation_alias=AliasChoices("mobileNo", "mobile_no"))
    skills: Optional[str] = None
    exp_years: Year = Field(default=None, validation_alias=AliasChoices("expyears", "expYears"))
    exp_desc: Optional[str] = Field(default=None, validation_alias=AliasChoices("expdesc", "expDesc"))
    university: Optional[str] = None
    program: Optional[str] = None
    courses: Optional[str] = None
    start_year: Year = Field(default=None, validation_alias=AliasChoices("startyear", "startYear"))
    end_year: Year = Field(default=None, validation_alias=AliasChoices("endyear", "endYear"))


class TeacherProfileUpdateRequest(BaseModel):
    skills: Union[str, list[str], None] = None
    exp_years: Year = Field(default=None, validation_alias=AliasChoices("expyears", "expYears"))
    exp_desc: Optional[str] = Field(default=None, validation_alias=AliasChoices("expdesc", "expDesc"))


class LearnerProfileUpdateRequest(BaseModel):
    university: Optional[str] = None
    program: Optional[str] = None
    courses: Optional[str] = None
    start_year: Year = Field(default=None, validation_alias=AliasChoices("startyear", "startYear"))
    end_year: Year = Field(default=None, validation_alias=AliasChoices("endyear", "endYear"))


class ProfileResponse(CamelModel):
    email: str
    first_name: str
    last_name: str
    mobile_no: str = ""
    skills: Optional[str] = None
    # legacy lowercase keys kept as-is
    expyears: Optional[str] = None
    expdesc: Optional[str] = None
    university: Optional[str] = None
    program: Optional[str] = None
    courses: Optional[str] = None
    startyear: Optional[str] = None
    endyear: Optional[str] = None

    @classmethod
    def from_teacher(cls, p: TeacherProfile) -> ProfileResponse:
        return cls(
            email=p.email,
            first_name=p.first_name,
            last_name=p.last_name,
            mobile_no=p.mobile_no,
            skills=p.skills,
            expyears=p.exp_years,
            expdesc=p.exp_desc,
        )

    @classmethod
    def from_learner(cls, p: LearnerProfile) -> ProfileResponse:
        return cls(
            email=p.email,
            first_name=p.first_name,
            last_name=p.last_name,
            mobile_no=p.mobile_no,
            university=p.university,
            program=p.program,
            courses=p.courses,
            startyear=p.start_year,
            endyear=p.end_year,
        )

    @classmethod
    def from_user(cls, user: UserProfile) -> ProfileResponse:
        """Teacher fields first, learner fields layered on top."""
        merged: dict = {}
        if user.teacher is not None:
            merged.update(cls.from_teacher(user.teacher).model_dump(exclude_none=True))
        if user.learner is not None:
            merged.update(cls.from_learner(user.learner).model_dump(exclude_none=True))
        return cls(**merged)


class TeacherSearchResponse(BaseModel):
    teachers: list[ProfileResponse]


# ---------- Jobs ----------

class SweepResults(BaseModel):
    processed: int
    expired: int
    failed: int


class SweepResponse(BaseModel):
    message: str
    results: SweepResults
