from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolClass


class ClassRepository(Protocol):
    """Repository interface for classes.

    Services depend on this Protocol, not on a concrete database.
    """

    def list_all(self) -> Sequence[SchoolClass]:
        """Ordered by grade, then class name."""

        raise NotImplementedError

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def find_duplicate(self, *, class_name: str, grade: int, exclude_id: Optional[int] = None) -> Optional[int]:
        """Return the id of another class with the same (name, grade), if any."""

        raise NotImplementedError

    def create(self, *, class_name: str, grade: int) -> int:
        raise NotImplementedError

    def update(self, *, class_id: int, class_name: str, grade: int) -> bool:
        raise NotImplementedError

    def delete(self, class_id: int) -> bool:
        raise NotImplementedError

    def has_students(self, class_id: int) -> bool:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
