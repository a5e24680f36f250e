from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence

from ..classes.repository import ClassRepository
from ..common.datetime_utils import today_local
from ..common.validators import (
    require_choice,
    require_date,
    require_id,
    require_max_length,
    require_min_length,
    require_non_empty,
    require_not_future,
)
from ..core.constants import STUDENT_NAME_MAX_LENGTH, STUDENT_NAME_MIN_LENGTH
from ..core.enums import Gender
from ..core.exceptions import MissingReferenceError, NotFoundError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewStudent:
    name: str
    class_id: int
    gender: Gender
    date_of_birth: date


def validate_student(*, name: Any, class_id: Any, gender: Any, date_of_birth: Any, today: date) -> NewStudent:
    """Shape/value checks only; class existence is checked by StudentService."""

    clean_name = require_non_empty(name, "name")
    require_min_length(clean_name, "name", STUDENT_NAME_MIN_LENGTH)
    require_max_length(clean_name, "name", STUDENT_NAME_MAX_LENGTH)
    cid = require_id(class_id, "class_id")
    gender_value = require_choice(gender, "gender", Gender)
    dob = require_not_future(require_date(date_of_birth, "date_of_birth"), "date_of_birth", today=today)
    return NewStudent(name=clean_name, class_id=cid, gender=gender_value, date_of_birth=dob)


class StudentService:
    """Use case: manage students."""

    def __init__(self, students: StudentRepository, classes: ClassRepository):
        self._students = students
        self._classes = classes

    def list_students(self, *, class_id: Any = None) -> Sequence[Student]:
        cid = require_id(class_id, "class_id") if class_id not in (None, "") else None
        return self._students.list_all(class_id=cid)

    def get_student(self, student_id: Any) -> Student:
        sid = require_id(student_id, "student_id")
        student = self._students.get_by_id(sid)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def create_student(
        self,
        *,
        name: Any,
        class_id: Any,
        gender: Any,
        date_of_birth: Any,
        today: Optional[date] = None,
    ) -> Student:
        payload = validate_student(
            name=name,
            class_id=class_id,
            gender=gender,
            date_of_birth=date_of_birth,
            today=today or today_local(),
        )
        self._require_class(payload.class_id)

        student_id = self._students.create(
            name=payload.name,
            class_id=payload.class_id,
            gender=payload.gender,
            date_of_birth=payload.date_of_birth,
        )
        logger.info("Created student id=%d in class id=%d", student_id, payload.class_id)
        return self.get_student(student_id)

    def update_student(
        self,
        student_id: Any,
        *,
        name: Any,
        class_id: Any,
        gender: Any,
        date_of_birth: Any,
        today: Optional[date] = None,
    ) -> Student:
        sid = require_id(student_id, "student_id")
        payload = validate_student(
            name=name,
            class_id=class_id,
            gender=gender,
            date_of_birth=date_of_birth,
            today=today or today_local(),
        )
        self._require_class(payload.class_id)

        if not self._students.get_by_id(sid):
            raise NotFoundError("Student not found")

        self._students.update(
            student_id=sid,
            name=payload.name,
            class_id=payload.class_id,
            gender=payload.gender,
            date_of_birth=payload.date_of_birth,
        )
        logger.info("Updated student id=%d", sid)
        return self.get_student(sid)

    def delete_student(self, student_id: Any) -> None:
        sid = require_id(student_id, "student_id")
        if not self._students.delete(sid):
            raise NotFoundError("Student not found")
        logger.info("Deleted student id=%d (attendance cascades)", sid)

    def _require_class(self, class_id: int) -> None:
        if not self._classes.get_by_id(class_id):
            raise MissingReferenceError("Class not found")
