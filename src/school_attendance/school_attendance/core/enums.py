from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status stored in the `attendance.status` ENUM column."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    EXCUSED = "Excused"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


class ExportFormat(str, Enum):
    EXCEL = "excel"
    JSON = "json"
