from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from skillsession.infra.repositories import (
    AvailabilityRepository,
    BookingRepository,
    ProfileRepository,
    SlotRepository,
)
from skillsession.infra.storage import DocumentStore, build_document_store
from skillsession.services.availability_service import AvailabilityService
from skillsession.services.booking_service import BookingService
from skillsession.services.expiry_service import ExpiryService
from skillsession.services.profile_service import ProfileService
from skillsession.settings import Settings, load_settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=4)
def _store_for(settings: Settings) -> DocumentStore:
    # one store (and connection pool / boto3 resource) per process
    return build_document_store(settings)


def get_document_store(settings: Settings = Depends(get_settings)) -> DocumentStore:
    return _store_for(settings)


def _slot_repository(store: DocumentStore, settings: Settings) -> SlotRepository:
    return SlotRepository(store, settings.tables.slots, page_size=settings.scan_page_size)


def get_availability_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> AvailabilityService:
    return AvailabilityService(
        AvailabilityRepository(store, settings.tables.availability),
        _slot_repository(store, settings),
        slot_duration_minutes=settings.slot_duration_minutes,
        strict_tiling=settings.strict_slot_tiling,
    )


def get_expiry_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> ExpiryService:
    return ExpiryService(_slot_repository(store, settings), tz=settings.tzinfo)


def get_booking_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> BookingService:
    return BookingService(
        BookingRepository(store, settings.tables.bookings, page_size=settings.scan_page_size),
        _slot_repository(store, settings),
    )


def get_profile_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> ProfileService:
    return ProfileService(
        ProfileRepository(
            store,
            teachers_table=settings.tables.teachers,
            learners_table=settings.tables.learners,
            skills_table=settings.tables.skills,
            page_size=settings.scan_page_size,
        )
    )
