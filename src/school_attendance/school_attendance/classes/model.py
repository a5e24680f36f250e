from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none


@dataclass(frozen=True)
class SchoolClass:
    """Domain entity: a class (homeroom) such as '3A', grade 3."""

    class_id: int
    class_name: str
    grade: int
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.class_id,
            "class_name": self.class_name,
            "grade": self.grade,
            "created_at": isoformat_or_none(self.created_at),
        }
