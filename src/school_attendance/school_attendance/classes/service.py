from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from ..common.datetime_utils import isoformat_or_none
from ..common.validators import require_id, require_int_range, require_max_length, require_non_empty
from ..core.constants import CLASS_NAME_MAX_LENGTH, MAX_GRADE, MIN_GRADE
from ..core.exceptions import ConflictError, NotFoundError
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import SchoolClass
from .repository import ClassRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewClass:
    class_name: str
    grade: int


@dataclass(frozen=True)
class ClassDetail:
    """Class with its students nested (read-model for the class page)."""

    school_class: SchoolClass
    students: Sequence[Student]

    def to_dict(self) -> dict:
        data = self.school_class.to_dict()
        data["students"] = [
            {
                "id": s.student_id,
                "name": s.name,
                "gender": s.gender.value,
                "date_of_birth": isoformat_or_none(s.date_of_birth),
                "created_at": isoformat_or_none(s.created_at),
            }
            for s in self.students
        ]
        return data


def validate_class(*, class_name: Any, grade: Any) -> NewClass:
    name = require_non_empty(class_name, "class_name")
    require_max_length(name, "class_name", CLASS_NAME_MAX_LENGTH)
    grade_value = require_int_range(grade, "grade", MIN_GRADE, MAX_GRADE)
    return NewClass(class_name=name, grade=grade_value)


class ClassService:
    """Use case: manage classes."""

    def __init__(self, classes: ClassRepository, students: StudentRepository):
        self._classes = classes
        self._students = students

    def list_classes(self) -> Sequence[SchoolClass]:
        return self._classes.list_all()

    def get_class(self, class_id: Any) -> ClassDetail:
        cid = require_id(class_id, "class_id")
        school_class = self._classes.get_by_id(cid)
        if not school_class:
            raise NotFoundError("Class not found")
        return ClassDetail(school_class=school_class, students=self._students.list_all(class_id=cid))

    def create_class(self, *, class_name: Any, grade: Any) -> SchoolClass:
        payload = validate_class(class_name=class_name, grade=grade)

        if self._classes.find_duplicate(class_name=payload.class_name, grade=payload.grade):
            raise ConflictError("Class with this name already exists for this grade")

        class_id = self._classes.create(class_name=payload.class_name, grade=payload.grade)
        logger.info("Created class %s (grade %d) id=%d", payload.class_name, payload.grade, class_id)
        return self._require(class_id)

    def update_class(self, class_id: Any, *, class_name: Any, grade: Any) -> SchoolClass:
        cid = require_id(class_id, "class_id")
        payload = validate_class(class_name=class_name, grade=grade)

        if not self._classes.get_by_id(cid):
            raise NotFoundError("Class not found")
        if self._classes.find_duplicate(class_name=payload.class_name, grade=payload.grade, exclude_id=cid):
            raise ConflictError("Class with this name already exists for this grade")

        self._classes.update(class_id=cid, class_name=payload.class_name, grade=payload.grade)
        logger.info("Updated class id=%d", cid)
        return self._require(cid)

    def delete_class(self, class_id: Any) -> None:
        cid = require_id(class_id, "class_id")

        if self._classes.has_students(cid):
            raise ConflictError("Cannot delete class with existing students")
        if not self._classes.delete(cid):
            raise NotFoundError("Class not found")
        logger.info("Deleted class id=%d", cid)

    def _require(self, class_id: int) -> SchoolClass:
        school_class = self._classes.get_by_id(class_id)
        if not school_class:
            raise NotFoundError("Class not found")
        return school_class
