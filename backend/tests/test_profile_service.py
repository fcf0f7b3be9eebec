import pytest

from skillsession.domain.schema import Registration, UserType
from skillsession.domain.validate import ValidationError
from skillsession.services.errors import NotFoundError
from skillsession.services.profile_service import ProfileService


@pytest.fixture
def service(profile_repository) -> ProfileService:
    return ProfileService(profile_repository)


def _register(service: ProfileService, email: str, types: set[UserType], skills: str = "") -> None:
    service.register_user(
        Registration(
            email=email,
            first_name="Ada",
            last_name="Lovelace",
            user_types=frozenset(types),
            skills=skills,
            university="KTH",
        )
    )


def test_register_both_roles_writes_both_profiles(service, profile_repository) -> None:
    _register(service, "ada@example.com", {UserType.TEACHER, UserType.LEARNER})

    assert profile_repository.get_teacher("ada@example.com") is not None
    assert profile_repository.get_learner("ada@example.com").university == "KTH"


def test_register_requires_names_and_type(service) -> None:
    with pytest.raises(ValidationError) as info:
        service.register_user(Registration(email="x@example.com", first_name="", last_name="L"))

    assert info.value.errors == ["Missing required field: firstName", "Missing required field: userType"]


def test_get_profile_merges_roles(service) -> None:
    _register(service, "ada@example.com", {UserType.TEACHER, UserType.LEARNER}, skills="math")

    profile = service.get_profile("ada@example.com", "learner,teacher")

    assert profile.teacher.skills == "math"
    assert profile.learner.university == "KTH"


def test_get_profile_missing_role_is_not_found(service) -> None:
    _register(service, "ada@example.com", {UserType.LEARNER})

    with pytest.raises(NotFoundError):
        service.get_profile("ada@example.com", "teacher")
    with pytest.raises(ValidationError):
        service.get_profile("ada@example.com", None)


def test_update_teacher_profile_indexes_skills(service, store) -> None:
    _register(service, "ada@example.com", {UserType.TEACHER})

    profile = service.update_teacher_profile("ada@example.com", skills=["math", " physics "], exp_years="5")

    assert profile.skills == "math, physics"
    assert profile.exp_years == "5"
    assert store.get("skills", {"skill": "physics"})["teachers"] == {"ada@example.com"}


def test_update_unknown_profiles_is_not_found(service) -> None:
    with pytest.raises(NotFoundError):
        service.update_teacher_profile("ghost@example.com", skills="math")
    with pytest.raises(NotFoundError):
        service.update_learner_profile("ghost@example.com", program="CS")


def test_update_learner_profile(service) -> None:
    _register(service, "ada@example.com", {UserType.LEARNER})

    profile = service.update_learner_profile("ada@example.com", program="CS", start_year="2021")

    assert (profile.program, profile.start_year, profile.first_name) == ("CS", "2021", "Ada")


def test_search_teachers_by_skill_deduplicates(service) -> None:
    _register(service, "ada@example.com", {UserType.TEACHER}, skills="math, physics")
    _register(service, "alan@example.com", {UserType.TEACHER}, skills="logic")
    _register(service, "learner@example.com", {UserType.LEARNER})

    found = service.search_teachers("math,physics")
    assert [t.email for t in found] == ["ada@example.com"]

    everyone = service.search_teachers("  ")
    assert {t.email for t in everyone} == {"ada@example.com", "alan@example.com"}
