from skillsession.infra.repositories.availability_repository import AvailabilityRepository
from skillsession.infra.repositories.booking_repository import BookingRepository
from skillsession.infra.repositories.profile_repository import ProfileRepository
from skillsession.infra.repositories.slot_repository import SlotRepository

__all__ = [
    "AvailabilityRepository",
    "BookingRepository",
    "ProfileRepository",
    "SlotRepository",
]
