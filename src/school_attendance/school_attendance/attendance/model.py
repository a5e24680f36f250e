from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import isoformat_or_none
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import AttendanceStatus
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status on one date."""

    attendance_id: int
    student_id: int
    date: date
    status: AttendanceStatus
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "student_id": self.student_id,
            "date": isoformat_or_none(self.date),
            "status": self.status.value,
            "created_at": isoformat_or_none(self.created_at),
        }


@dataclass(frozen=True)
class EnrichedAttendance:
    """Read-model: attendance record joined with its student and the student's class."""

    record: AttendanceRecord
    student: Student

    @property
    def date(self) -> date:
        return self.record.date

    @property
    def status(self) -> AttendanceStatus:
        return self.record.status

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["student"] = self.student.to_dict()
        return data


@dataclass(frozen=True)
class AttendanceFilter:
    """Named, optional filters for attendance reads (combined with AND).

    `limit=None` disables pagination (reports/exports read the whole window).
    """

    student_id: Optional[int] = None
    class_id: Optional[int] = None
    date: Optional[date] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[AttendanceStatus] = None
    limit: Optional[int] = DEFAULT_PAGE_SIZE
    offset: int = 0


@dataclass(frozen=True)
class NewAttendance:
    student_id: int
    date: date
    status: AttendanceStatus


@dataclass(frozen=True)
class AttendancePage:
    rows: Sequence[EnrichedAttendance]
    limit: Optional[int]
    offset: int


@dataclass(frozen=True)
class StudentAttendanceEntry:
    student: Student
    attendance: Optional[AttendanceRecord]

    def to_dict(self) -> dict:
        data = self.student.to_dict()
        data["attendance"] = (
            {
                "id": self.attendance.attendance_id,
                "status": self.attendance.status.value,
                "date": isoformat_or_none(self.attendance.date),
            }
            if self.attendance
            else None
        )
        return data


@dataclass(frozen=True)
class ClassAttendanceView:
    class_id: int
    date: date
    students: Sequence[StudentAttendanceEntry]

    def to_dict(self) -> dict:
        return {
            "date": isoformat_or_none(self.date),
            "class_id": self.class_id,
            "students": [entry.to_dict() for entry in self.students],
        }
