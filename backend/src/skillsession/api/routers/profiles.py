from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from skillsession.api.deps import get_profile_service
from skillsession.api.schemas import (
    LearnerProfileUpdateRequest,
    ProfileResponse,
    RegistrationRequest,
    TeacherProfileUpdateRequest,
    TeacherSearchResponse,
)
from skillsession.domain.schema import Registration
from skillsession.domain.validate import ValidationError, parse_user_types
from skillsession.services.profile_service import ProfileService

router = APIRouter(tags=["profiles"])


def _text(value: object) -> str:
    return "" if value is None else str(value)


@router.post(
    "/users",
    response_model=ProfileResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def register_user(
    body: RegistrationRequest,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    if not body.user_type:
        raise ValidationError(["Missing required field: userType"])
    registration = Registration(
        email=_text(body.email).strip(),
        first_name=_text(body.first_name),
        last_name=_text(body.last_name),
        user_types=parse_user_types(body.user_type),
        mobile_no=_text(body.mobile_no),
        skills=_text(body.skills),
        exp_years=_text(body.exp_years),
        exp_desc=_text(body.exp_desc),
        university=_text(body.university),
        program=_text(body.program),
        courses=_text(body.courses),
        start_year=_text(body.start_year),
        end_year=_text(body.end_year),
    )
    return ProfileResponse.from_user(service.register_user(registration))


@router.put("/users/{email}/teacher", response_model=ProfileResponse, response_model_exclude_none=True)
def update_teacher_profile(
    email: str,
    body: TeacherProfileUpdateRequest,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    profile = service.update_teacher_profile(
        email,
        skills=body.skills,
        exp_years=_text(body.exp_years),
        exp_desc=_text(body.exp_desc),
    )
    return ProfileResponse.from_teacher(profile)


@router.put("/users/{email}/learner", response_model=ProfileResponse, response_model_exclude_none=True)
def update_learner_profile(
    email: str,
    body: LearnerProfileUpdateRequest,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    profile = service.update_learner_profile(
        email,
        university=_text(body.university),
        program=_text(body.program),
        courses=_text(body.courses),
        start_year=_text(body.start_year),
        end_year=_text(body.end_year),
    )
    return ProfileResponse.from_learner(profile)


@router.get("/users/{email}", response_model=ProfileResponse, response_model_exclude_none=True)
def get_profile(
    email: str,
    user_type: Optional[str] = Query(default=None, alias="userType"),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    return ProfileResponse.from_user(service.get_profile(email, user_type))


@router.get("/teachers", response_model=TeacherSearchResponse, response_model_exclude_none=True)
def search_teachers(
    skills: Optional[str] = Query(default=None),
    service: ProfileService = Depends(get_profile_service),
) -> TeacherSearchResponse:
    teachers = service.search_teachers(skills)
    return TeacherSearchResponse(teachers=[ProfileResponse.from_teacher(t) for t in teachers])
