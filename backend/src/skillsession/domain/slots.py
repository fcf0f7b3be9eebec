# domain/slots.py
# Splitting availability windows into slots and deciding when a slot is over.

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import List, Tuple

from skillsession.domain.schema import AvailabilityWindow, Slot, SlotStatus, slot_key


def build_slots(window: AvailabilityWindow, duration_minutes: int = 60) -> Tuple[Slot, ...]:
    """
    Walks the window in fixed steps from start_time. Only whole slots are
    emitted: a trailing remainder shorter than one step is dropped.
    """
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be > 0 (got {duration_minutes})")

    step = timedelta(minutes=duration_minutes)
    current = datetime.combine(window.date, window.start_time)
    final = datetime.combine(window.date, window.end_time)

    out: List[Slot] = []
    sequence = 1
    while current + step <= final:
        out.append(
            Slot(
                id=slot_key(sequence, window.date, window.teacher_id),
                date=window.date,
                start_time=current.time(),
                end_time=(current + step).time(),
                teacher_id=window.teacher_id,
                status=SlotStatus.OPEN,
            )
        )
        current += step
        sequence += 1
    return tuple(out)


def slot_ends_at(slot: Slot, tz: tzinfo) -> datetime:
    """Stored date/time strings carry no zone; they are read in `tz`."""
    return datetime.combine(slot.date, slot.end_time, tzinfo=tz)


def is_slot_expired(slot: Slot, now: datetime, tz: tzinfo) -> bool:
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    return now > slot_ends_at(slot, tz)
