from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .core.constants import DEFAULT_CHART_DAYS, DEFAULT_SCHOOL_NAME
from .database.connection import DatabaseConnection, DBConfig
from .reports.service import ReportService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    classes_repo: ClassRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    class_service: ClassService
    student_service: StudentService
    attendance_service: AttendanceService
    report_service: ReportService


def assemble_container(
    *,
    classes_repo: ClassRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    conn: Optional[DatabaseConnection] = None,
    school_name: str = DEFAULT_SCHOOL_NAME,
    chart_default_days: int = DEFAULT_CHART_DAYS,
) -> Container:
    """Wire services on top of any repository implementations (MySQL or in-memory)."""

    return Container(
        conn=conn,
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        class_service=ClassService(classes_repo, students_repo),
        student_service=StudentService(students_repo, classes_repo),
        attendance_service=AttendanceService(attendance_repo, students_repo, classes_repo),
        report_service=ReportService(
            attendance_repo,
            students_repo,
            classes_repo,
            school_name=school_name,
            default_chart_days=chart_default_days,
        ),
    )


def build_container(
    *,
    db_config: dict,
    school_name: str = DEFAULT_SCHOOL_NAME,
    chart_default_days: int = DEFAULT_CHART_DAYS,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return assemble_container(
        conn=conn,
        classes_repo=MySQLClassRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        school_name=school_name,
        chart_default_days=chart_default_days,
    )
