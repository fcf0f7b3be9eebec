from __future__ import annotations

from fastapi import APIRouter, Depends, status

from skillsession.api.deps import get_availability_service
from skillsession.api.schemas import AvailabilityCreateRequest, AvailabilityCreateResponse, SlotResponse
from skillsession.services.availability_service import AvailabilityService

router = APIRouter(tags=["availability"])


@router.post("/availability", response_model=AvailabilityCreateResponse, status_code=status.HTTP_201_CREATED)
def create_availability(
    body: AvailabilityCreateRequest,
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityCreateResponse:
    result = service.create_availability(body.teacher_id, body.date, body.start_time, body.end_time)
    return AvailabilityCreateResponse(
        success=True,
        message=f"Availability and {result.slots_created} time slots created successfully",
        slots_created=result.slots_created,
        item_found=False,
    )


@router.get("/teachers/{teacher_id}/slots", response_model=list[SlotResponse])
def list_teacher_slots(
    teacher_id: str,
    service: AvailabilityService = Depends(get_availability_service),
) -> list[SlotResponse]:
    return [SlotResponse.from_slot(slot) for slot in service.list_teacher_slots(teacher_id)]
