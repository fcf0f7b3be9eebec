from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, Tuple

from skillsession.domain.schema import AvailabilityWindow, Slot
from skillsession.domain.slots import build_slots
from skillsession.domain.validate import validate_availability
from skillsession.infra.repositories.availability_repository import AvailabilityRepository
from skillsession.infra.repositories.slot_repository import SlotRepository
from skillsession.services.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailabilityResult:
    window: AvailabilityWindow
    slots: Tuple[Slot, ...]

    @property
    def slots_created(self) -> int:
        return len(self.slots)


class AvailabilityService:
    def __init__(
        self,
        windows: AvailabilityRepository,
        slots: SlotRepository,
        *,
        slot_duration_minutes: int = 60,
        strict_tiling: bool = False,
    ) -> None:
        self._windows = windows
        self._slots = slots
        self._slot_duration_minutes = slot_duration_minutes
        self._strict_tiling = strict_tiling

    def create_availability(
        self,
        teacher_id: Optional[str],
        date: Optional[str],
        start_time: Optional[str],
        end_time: Optional[str],
    ) -> AvailabilityResult:
        window = validate_availability(
            teacher_id,
            date,
            start_time,
            end_time,
            slot_duration_minutes=self._slot_duration_minutes,
            strict_tiling=self._strict_tiling,
        )

        if self._windows.exists(window.teacher_id, window.date):
            raise ConflictError("Availability already exists for this date")

        slots = build_slots(window, self._slot_duration_minutes)

        # Two separate writes: a failure on the second leaves the window without slots.
        self._windows.add(window)
        self._slots.add_many(slots)

        logger.info(
            "Created availability %s with %d slots (%s-%s)",
            window.key,
            len(slots),
            window.start_time.strftime("%H:%M"),
            window.end_time.strftime("%H:%M"),
        )
        return AvailabilityResult(window=window, slots=slots)

    def list_teacher_slots(self, teacher_id: str) -> list[Slot]:
        slots = self._slots.list_for_teacher(teacher_id)
        logger.info("Found %d slots for teacher %s", len(slots), teacher_id)
        if not slots:
            raise NotFoundError("Slots for teacher", teacher_id)
        return slots
