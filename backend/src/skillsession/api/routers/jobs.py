from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from skillsession.api.deps import get_expiry_service
from skillsession.api.schemas import SweepResponse, SweepResults
from skillsession.services.errors import StorageError
from skillsession.services.expiry_service import ExpiryService

router = APIRouter(prefix="/jobs", tags=["jobs"])
logger = logging.getLogger(__name__)


@router.post("/expire-slots", response_model=SweepResponse)
def expire_slots(service: ExpiryService = Depends(get_expiry_service)) -> SweepResponse | JSONResponse:
    try:
        result = service.sweep()
    except StorageError as exc:
        logger.error("Expired slots sweep failed: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"message": "Error processing expired slots", "error": str(exc)},
        )
    return SweepResponse(
        message="Expired slots processed successfully",
        results=SweepResults(**result.as_dict()),
    )
