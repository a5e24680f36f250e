from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence, Set

from ..core.enums import Gender
from .model import Student


class StudentRepository(Protocol):
    def list_all(self, *, class_id: Optional[int] = None) -> Sequence[Student]:
        """Students ordered by name, each joined with its class."""

        raise NotImplementedError

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def existing_ids(self, student_ids: Iterable[int]) -> Set[int]:
        """Subset of `student_ids` that exist, checked in one query."""

        raise NotImplementedError

    def create(self, *, name: str, class_id: int, gender: Gender, date_of_birth: date) -> int:
        raise NotImplementedError

    def update(self, *, student_id: int, name: str, class_id: int, gender: Gender, date_of_birth: date) -> bool:
        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
