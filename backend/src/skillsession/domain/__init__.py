from skillsession.domain.slots import build_slots, is_slot_expired
from skillsession.domain.validate import ValidationError, validate_availability

__all__ = ["build_slots", "is_slot_expired", "ValidationError", "validate_availability"]
