from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from skillsession.domain.schema import (
    LearnerProfile,
    Registration,
    TeacherProfile,
    UserProfile,
    UserType,
)
from skillsession.domain.validate import ValidationError, parse_user_types, validate_registration
from skillsession.infra.repositories.profile_repository import ProfileRepository
from skillsession.services.errors import NotFoundError

logger = logging.getLogger(__name__)

Skills = Union[str, Sequence[str], None]


def _split_skills(skills: Skills) -> list[str]:
    if skills is None:
        return []
    parts = skills.split(",") if isinstance(skills, str) else skills
    return [p.strip() for p in parts if p and p.strip()]


class ProfileService:
    def __init__(self, repository: ProfileRepository) -> None:
        self._repository = repository

    def register_user(self, registration: Registration) -> UserProfile:
        validate_registration(registration)
        teacher = learner = None

        if UserType.TEACHER in registration.user_types:
            teacher = TeacherProfile(
                email=registration.email,
                first_name=registration.first_name,
                last_name=registration.last_name,
                mobile_no=registration.mobile_no,
                skills=registration.skills,
                exp_years=registration.exp_years,
                exp_desc=registration.exp_desc,
            )
            self._repository.put_teacher(teacher)

        if UserType.LEARNER in registration.user_types:
            learner = LearnerProfile(
                email=registration.email,
                first_name=registration.first_name,
                last_name=registration.last_name,
                mobile_no=registration.mobile_no,
                university=registration.university,
                program=registration.program,
                courses=registration.courses,
                start_year=registration.start_year,
                end_year=registration.end_year,
            )
            self._repository.put_learner(learner)

        logger.info("Registered %s as %s", registration.email, ",".join(sorted(t.value for t in registration.user_types)))
        return UserProfile(email=registration.email, teacher=teacher, learner=learner)

    def update_teacher_profile(
        self,
        email: str,
        *,
        skills: Skills = None,
        exp_years: str = "",
        exp_desc: str = "",
    ) -> TeacherProfile:
        self._require_email(email)
        if self._repository.get_teacher(email) is None:
            raise NotFoundError("Teacher profile", email)

        skill_list = _split_skills(skills)
        profile = self._repository.update_teacher(
            email,
            {"skills": ", ".join(skill_list), "expyears": exp_years, "expdesc": exp_desc},
        )
        # skill -> teachers index
        for skill in skill_list:
            self._repository.add_teacher_to_skill(skill, email)
        return profile

    def update_learner_profile(
        self,
        email: str,
        *,
        university: str = "",
        program: str = "",
        courses: str = "",
        start_year: str = "",
        end_year: str = "",
    ) -> LearnerProfile:
        self._require_email(email)
        if self._repository.get_learner(email) is None:
            raise NotFoundError("Learner profile", email)

        return self._repository.update_learner(
            email,
            {
                "university": university,
                "program": program,
                "courses": courses,
                "startyear": start_year,
                "endyear": end_year,
            },
        )

    def get_profile(self, email: str, user_type: Optional[str]) -> UserProfile:
        self._require_email(email)
        types = parse_user_types(user_type)
        teacher = learner = None

        if UserType.TEACHER in types:
            teacher = self._repository.get_teacher(email)
            if teacher is None:
                raise NotFoundError("Teacher profile", email)
        if UserType.LEARNER in types:
            learner = self._repository.get_learner(email)
            if learner is None:
                raise NotFoundError("Learner profile", email)

        return UserProfile(email=email, teacher=teacher, learner=learner)

    def search_teachers(self, skills_query: Optional[str]) -> list[TeacherProfile]:
        """Comma-separated skills; a blank query lists every teacher."""
        skills = _split_skills(skills_query)
        if not skills:
            return self._repository.list_teachers()

        found: dict[str, TeacherProfile] = {}
        for skill in skills:
            for teacher in self._repository.search_teachers(skill):
                found.setdefault(teacher.email, teacher)
        logger.info("Teacher search for %s matched %d teachers", skills, len(found))
        return list(found.values())

    @staticmethod
    def _require_email(email: Optional[str]) -> None:
        if not email or not email.strip():
            raise ValidationError(["Email is required"])
