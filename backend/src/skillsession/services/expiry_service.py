from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, tzinfo
import logging
from typing import Callable, Optional

from skillsession.domain.schema import SlotStatus
from skillsession.domain.slots import is_slot_expired
from skillsession.infra.repositories.slot_repository import SlotRepository
from skillsession.services.errors import StorageError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class SweepResult:
    processed: int = 0
    expired: int = 0
    failed: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class ExpiryService:
    """
    Flags slots whose end has passed as EXPIRED.

    A failed scan aborts the sweep. A failed per-slot update is logged and
    counted; the slot stays eligible for the next run.
    """

    def __init__(self, slots: SlotRepository, *, tz: tzinfo, clock: Optional[Clock] = None) -> None:
        self._slots = slots
        self._tz = tz
        self._clock = clock or (lambda: datetime.now(tz))

    def sweep(self) -> SweepResult:
        now = self._clock()
        logger.info("Starting expired slots sweep at %s", now.isoformat())

        slots = self._slots.list_active()
        logger.info("Processing %d active slots", len(slots))

        expired = 0
        failed = 0
        for slot in slots:
            if not is_slot_expired(slot, now, self._tz):
                continue
            try:
                self._slots.set_status(slot.id, SlotStatus.EXPIRED)
            except StorageError:
                logger.warning("Failed to expire slot %s (%s %s)", slot.id, slot.date, slot.end_time, exc_info=True)
                failed += 1
                continue
            logger.debug("Slot %s expired (%s %s)", slot.id, slot.date, slot.end_time)
            expired += 1

        result = SweepResult(processed=len(slots), expired=expired, failed=failed)
        logger.info(
            "Expired slots sweep complete: %d processed, %d expired, %d failed",
            result.processed,
            result.expired,
            result.failed,
        )
        return result
