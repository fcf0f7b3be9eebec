from __future__ import annotations

from typing import Any, Mapping, Optional

from skillsession.domain.io import (
    learner_from_document,
    learner_to_document,
    teacher_from_document,
    teacher_to_document,
)
from skillsession.domain.schema import LearnerProfile, TeacherProfile
from skillsession.infra.storage.document_store import DocumentStore, Filter, scan_all


class ProfileRepository:
    def __init__(
        self,
        store: DocumentStore,
        *,
        teachers_table: str = "teachers",
        learners_table: str = "learners",
        skills_table: str = "skills",
        page_size: int | None = 100,
    ) -> None:
        self._store = store
        self._teachers = teachers_table
        self._learners = learners_table
        self._skills = skills_table
        self._page_size = page_size

    def get_teacher(self, email: str) -> Optional[TeacherProfile]:
        document = self._store.get(self._teachers, {"id": email})
        return teacher_from_document(document) if document is not None else None

    def get_learner(self, email: str) -> Optional[LearnerProfile]:
        document = self._store.get(self._learners, {"id": email})
        return learner_from_document(document) if document is not None else None

    def put_teacher(self, profile: TeacherProfile) -> None:
        self._store.put(self._teachers, teacher_to_document(profile))

    def put_learner(self, profile: LearnerProfile) -> None:
        self._store.put(self._learners, learner_to_document(profile))

    def update_teacher(self, email: str, changes: Mapping[str, Any]) -> TeacherProfile:
        return teacher_from_document(self._store.update(self._teachers, {"id": email}, changes))

    def update_learner(self, email: str, changes: Mapping[str, Any]) -> LearnerProfile:
        return learner_from_document(self._store.update(self._learners, {"id": email}, changes))

    def add_teacher_to_skill(self, skill: str, email: str) -> None:
        self._store.add_to_set(self._skills, {"skill": skill}, "teachers", [email])

    def list_teachers(self) -> list[TeacherProfile]:
        documents = scan_all(self._store, self._teachers, page_size=self._page_size)
        return [teacher_from_document(d) for d in documents]

    def search_teachers(self, skill: str) -> list[TeacherProfile]:
        """Teachers whose free-text skills contain `skill`."""
        documents = scan_all(
            self._store,
            self._teachers,
            [Filter("skills", "contains", skill)],
            page_size=self._page_size,
        )
        return [teacher_from_document(d) for d in documents]
