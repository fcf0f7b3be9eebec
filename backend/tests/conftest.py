from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Mapping, Optional, Sequence

import pytest

from skillsession.domain.schema import Slot, SlotStatus
from skillsession.infra.repositories import (
    AvailabilityRepository,
    BookingRepository,
    ProfileRepository,
    SlotRepository,
)
from skillsession.infra.storage import Filter, InMemoryDocumentStore, ScanPage
from skillsession.services.errors import StorageError
from skillsession.settings import Settings


class RecordingStore(InMemoryDocumentStore):
    """In-memory store that counts calls and can fail chosen operations."""

    def __init__(self, key_fields: Mapping[str, str]) -> None:
        super().__init__(key_fields)
        self.writes = 0
        self.scans = 0
        self.failing_updates: set[str] = set()
        self.fail_scan = False

    def put(self, table: str, item: Mapping[str, Any]) -> None:
        self.writes += 1
        super().put(table, item)

    def batch_put(self, table: str, items: Sequence[Mapping[str, Any]]) -> None:
        self.writes += 1
        super().batch_put(table, items)

    def update(
        self,
        table: str,
        key: dict,
        changes: Mapping[str, Any],
        *,
        condition: Optional[Filter] = None,
    ) -> dict:
        if any(str(v) in self.failing_updates for v in key.values()):
            raise StorageError("update", table, "simulated failure")
        self.writes += 1
        return super().update(table, key, changes, condition=condition)

    def scan(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        *,
        start_key: Optional[dict] = None,
        limit: Optional[int] = None,
    ) -> ScanPage:
        if self.fail_scan:
            raise StorageError("scan", table, "simulated failure")
        self.scans += 1
        return super().scan(table, filters, start_key=start_key, limit=limit)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_name="skillsession-test",
        app_version="test",
        debug=False,
        db_backend="memory",
        database_url=None,
        aws_region="eu-north-1",
        dynamodb_endpoint_url=None,
        scan_page_size=2,
    )


@pytest.fixture
def store(settings: Settings) -> RecordingStore:
    return RecordingStore(settings.tables.key_fields())


@pytest.fixture
def slot_repository(store: RecordingStore, settings: Settings) -> SlotRepository:
    return SlotRepository(store, settings.tables.slots, page_size=settings.scan_page_size)


@pytest.fixture
def availability_repository(store: RecordingStore, settings: Settings) -> AvailabilityRepository:
    return AvailabilityRepository(store, settings.tables.availability)


@pytest.fixture
def booking_repository(store: RecordingStore, settings: Settings) -> BookingRepository:
    return BookingRepository(store, settings.tables.bookings, page_size=settings.scan_page_size)


@pytest.fixture
def profile_repository(store: RecordingStore, settings: Settings) -> ProfileRepository:
    return ProfileRepository(store, page_size=settings.scan_page_size)


def make_slot(
    slot_id: str,
    *,
    day: date = date(2024, 1, 1),
    start: time = time(9, 0),
    end: time = time(10, 0),
    teacher_id: str = "t1@example.com",
    status: SlotStatus = SlotStatus.OPEN,
) -> Slot:
    return Slot(id=slot_id, date=day, start_time=start, end_time=end, teacher_id=teacher_id, status=status)


def fixed_clock(value: datetime):
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return lambda: value
