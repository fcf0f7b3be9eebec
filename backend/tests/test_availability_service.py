from datetime import date, time

import pytest

from skillsession.domain.schema import SlotStatus
from skillsession.domain.validate import ValidationError
from skillsession.infra.repositories import AvailabilityRepository, SlotRepository
from skillsession.services.availability_service import AvailabilityService
from skillsession.services.errors import ConflictError, NotFoundError


def _service(
    availability_repository: AvailabilityRepository,
    slot_repository: SlotRepository,
    *,
    strict_tiling: bool = False,
) -> AvailabilityService:
    return AvailabilityService(availability_repository, slot_repository, strict_tiling=strict_tiling)


def test_create_availability_persists_window_and_slots(availability_repository, slot_repository, store) -> None:
    service = _service(availability_repository, slot_repository)

    result = service.create_availability("t1@example.com", "2024-01-01", "09:00", "11:00")

    assert result.slots_created == 2
    assert store.writes == 2
    stored_window = availability_repository.get("t1@example.com", date(2024, 1, 1))
    assert (stored_window.start_time, stored_window.end_time) == (time(9, 0), time(11, 0))

    slots = slot_repository.list_for_teacher("t1@example.com")
    assert [(s.start_time, s.end_time) for s in slots] == [(time(9, 0), time(10, 0)), (time(10, 0), time(11, 0))]
    assert {s.status for s in slots} == {SlotStatus.OPEN}


def test_second_window_for_same_date_conflicts_without_writes(availability_repository, slot_repository, store) -> None:
    service = _service(availability_repository, slot_repository)
    service.create_availability("t1@example.com", "2024-01-01", "09:00", "11:00")
    writes_before = store.writes

    with pytest.raises(ConflictError):
        service.create_availability("t1@example.com", "2024-01-01", "13:00", "15:00")

    assert store.writes == writes_before
    assert len(slot_repository.list_for_teacher("t1@example.com")) == 2


def test_other_date_or_teacher_is_not_a_conflict(availability_repository, slot_repository) -> None:
    service = _service(availability_repository, slot_repository)
    service.create_availability("t1@example.com", "2024-01-01", "09:00", "10:00")

    service.create_availability("t1@example.com", "2024-01-02", "09:00", "10:00")
    service.create_availability("t2@example.com", "2024-01-01", "09:00", "10:00")

    assert len(slot_repository.list_for_teacher("t1@example.com")) == 2
    assert len(slot_repository.list_for_teacher("t2@example.com")) == 1


def test_short_window_is_rejected_without_writes(availability_repository, slot_repository, store) -> None:
    service = _service(availability_repository, slot_repository)

    with pytest.raises(ValidationError) as info:
        service.create_availability("t1@example.com", "2024-01-01", "09:00", "09:30")

    assert "must be at least 60 minutes" in str(info.value)
    assert store.writes == 0


def test_partial_trailing_slot_dropped_by_default(availability_repository, slot_repository) -> None:
    service = _service(availability_repository, slot_repository)

    result = service.create_availability("t1@example.com", "2024-01-01", "09:00", "10:45")

    assert result.slots_created == 1
    assert result.slots[0].end_time == time(10, 0)


def test_strict_tiling_rejects_partial_trailing_slot(availability_repository, slot_repository, store) -> None:
    service = _service(availability_repository, slot_repository, strict_tiling=True)

    with pytest.raises(ValidationError):
        service.create_availability("t1@example.com", "2024-01-01", "09:00", "10:45")

    assert store.writes == 0
    assert service.create_availability("t1@example.com", "2024-01-01", "09:00", "11:00").slots_created == 2


def test_list_teacher_slots_orders_by_date_and_time(availability_repository, slot_repository) -> None:
    service = _service(availability_repository, slot_repository)
    service.create_availability("t1@example.com", "2024-01-02", "09:00", "10:00")
    service.create_availability("t1@example.com", "2024-01-01", "14:00", "16:00")

    slots = service.list_teacher_slots("t1@example.com")

    assert [(s.date, s.start_time) for s in slots] == [
        (date(2024, 1, 1), time(14, 0)),
        (date(2024, 1, 1), time(15, 0)),
        (date(2024, 1, 2), time(9, 0)),
    ]


def test_list_teacher_slots_without_slots_is_not_found(availability_repository, slot_repository) -> None:
    with pytest.raises(NotFoundError):
        _service(availability_repository, slot_repository).list_teacher_slots("nobody@example.com")
