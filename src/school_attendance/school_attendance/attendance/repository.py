from __future__ import annotations

from datetime import date
from typing import Iterable, Protocol, Sequence

from .model import AttendanceFilter, AttendanceRecord, EnrichedAttendance, NewAttendance


class AttendanceRepository(Protocol):
    def list_filtered(self, filters: AttendanceFilter, *, newest_first: bool = True) -> Sequence[EnrichedAttendance]:
        """Filtered, enriched rows.

        newest_first: date DESC, created_at DESC (ties: newest insert first).
        Otherwise the reverse, which is what chart aggregation consumes.
        """

        raise NotImplementedError

    def get_for_students_on_date(self, student_ids: Iterable[int], on_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def upsert_many(self, records: Sequence[NewAttendance]) -> Sequence[EnrichedAttendance]:
        """Insert-or-update keyed on (student_id, date) in one transaction.

        Returns enriched rows in the order of `records`.
        """

        raise NotImplementedError
