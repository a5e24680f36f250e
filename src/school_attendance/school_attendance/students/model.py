from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..classes.model import SchoolClass
from ..common.datetime_utils import isoformat_or_none
from ..core.enums import Gender


@dataclass(frozen=True)
class Student:
    """Domain entity: a student, optionally carrying its class (joined read)."""

    student_id: int
    name: str
    class_id: int
    gender: Gender
    date_of_birth: date
    created_at: Optional[datetime] = None
    school_class: Optional[SchoolClass] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.student_id,
            "name": self.name,
            "class_id": self.class_id,
            "gender": self.gender.value,
            "date_of_birth": isoformat_or_none(self.date_of_birth),
            "created_at": isoformat_or_none(self.created_at),
        }
        if self.school_class is not None:
            data["class"] = self.school_class.to_dict()
        return data
