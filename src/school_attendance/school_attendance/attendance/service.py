from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Sequence

from ..classes.repository import ClassRepository
from ..common.validators import require_choice, require_date, require_id, require_int
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import AttendanceStatus
from ..core.exceptions import MissingReferenceError, NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .model import (
    AttendanceFilter,
    AttendancePage,
    ClassAttendanceView,
    EnrichedAttendance,
    NewAttendance,
    StudentAttendanceEntry,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_attendance(*, student_id: Any, date: Any, status: Any) -> NewAttendance:
    return NewAttendance(
        student_id=require_id(student_id, "student_id"),
        date=require_date(date, "date"),
        status=require_choice(status, "status", AttendanceStatus),
    )


def validate_bulk_attendance(*, date: Any, records: Any) -> list[NewAttendance]:
    """Validate a bulk submission and stamp every record with the shared date.

    Duplicate student ids inside one batch are rejected: the batch would
    otherwise upsert the same (student, date) twice with an ambiguous winner.
    """

    shared_date = require_date(date, "date")
    if not isinstance(records, (list, tuple)) or not records:
        raise ValidationError("records must contain at least 1 item")

    out: list[NewAttendance] = []
    seen: set[int] = set()
    for index, item in enumerate(records):
        if not isinstance(item, Mapping):
            raise ValidationError(f"records[{index}] must be an object")
        sid = require_id(item.get("student_id"), f"records[{index}].student_id")
        status = require_choice(item.get("status"), f"records[{index}].status", AttendanceStatus)
        if sid in seen:
            raise ValidationError(f"records[{index}].student_id {sid} is duplicated in this batch")
        seen.add(sid)
        out.append(NewAttendance(student_id=sid, date=shared_date, status=status))
    return out


def build_attendance_filter(
    *,
    student_id: Any = None,
    class_id: Any = None,
    date: Any = None,
    start_date: Any = None,
    end_date: Any = None,
    status: Any = None,
    limit: Any = None,
    offset: Any = None,
) -> AttendanceFilter:
    """Turn loosely-typed query parameters into an AttendanceFilter."""

    page_size = DEFAULT_PAGE_SIZE if _blank(limit) else require_int(limit, "limit")
    if page_size <= 0:
        raise ValidationError("limit must be greater than 0")
    skip = 0 if _blank(offset) else require_int(offset, "offset")
    if skip < 0:
        raise ValidationError("offset must not be negative")

    return AttendanceFilter(
        student_id=None if _blank(student_id) else require_id(student_id, "student_id"),
        class_id=None if _blank(class_id) else require_id(class_id, "class_id"),
        date=None if _blank(date) else require_date(date, "date"),
        start_date=None if _blank(start_date) else require_date(start_date, "start_date"),
        end_date=None if _blank(end_date) else require_date(end_date, "end_date"),
        status=None if _blank(status) else require_choice(status, "status", AttendanceStatus),
        limit=page_size,
        offset=skip,
    )


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        classes: ClassRepository,
    ):
        self._attendance = attendance
        self._students = students
        self._classes = classes

    def list_attendance(self, filters: AttendanceFilter) -> AttendancePage:
        rows = self._attendance.list_filtered(filters)
        return AttendancePage(rows=rows, limit=filters.limit, offset=filters.offset)

    def record_attendance(self, *, student_id: Any, date: Any, status: Any) -> EnrichedAttendance:
        record = validate_attendance(student_id=student_id, date=date, status=status)

        if not self._students.get_by_id(record.student_id):
            raise MissingReferenceError("Student not found")

        rows = self._attendance.upsert_many([record])
        if not rows:
            raise RuntimeError("Attendance upsert returned no row")
        logger.info(
            "Recorded %s for student id=%d on %s",
            record.status.value,
            record.student_id,
            record.date.isoformat(),
        )
        return rows[0]

    def record_bulk_attendance(self, *, date: Any, records: Any) -> Sequence[EnrichedAttendance]:
        batch = validate_bulk_attendance(date=date, records=records)

        # Precondition for the whole batch: nothing is written if any id is unknown.
        submitted = [r.student_id for r in batch]
        existing = self._students.existing_ids(submitted)
        missing = [sid for sid in submitted if sid not in existing]
        if missing:
            logger.warning("Bulk attendance rejected, unknown student ids: %s", missing)
            raise MissingReferenceError("One or more students not found")

        rows = self._attendance.upsert_many(batch)
        logger.info("Recorded %d attendance rows for %s", len(rows), batch[0].date.isoformat())
        return rows

    def class_attendance(self, *, class_id: Any, date: Any) -> ClassAttendanceView:
        cid = require_id(class_id, "class_id")
        on_date = require_date(date, "date")

        if not self._classes.get_by_id(cid):
            raise NotFoundError("Class not found")

        students = self._students.list_all(class_id=cid)
        records = self._attendance.get_for_students_on_date([s.student_id for s in students], on_date)
        by_student = {r.student_id: r for r in records}

        entries = [
            StudentAttendanceEntry(student=s, attendance=by_student.get(s.student_id))
            for s in students
        ]
        return ClassAttendanceView(class_id=cid, date=on_date, students=entries)
