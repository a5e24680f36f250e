from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Callable, Optional, Sequence

from ..attendance.model import AttendanceFilter, EnrichedAttendance
from ..attendance.repository import AttendanceRepository
from ..classes.repository import ClassRepository
from ..common.datetime_utils import age_in_years, format_long_date, subtract_months, today_local
from ..common.validators import require_choice, require_id, require_int_range
from ..core.constants import (
    ATTENDANCE_COLUMN_MAX_WIDTH,
    DASHBOARD_RECENT_DAYS,
    DASHBOARD_RECENT_LIMIT,
    DEFAULT_CHART_DAYS,
    DEFAULT_EXPORT_PERIOD,
    DEFAULT_SCHOOL_NAME,
    EXPORT_PERIOD_MONTHS,
    MAX_CHART_DAYS,
    STUDENT_COLUMN_MAX_WIDTH,
)
from ..core.enums import AttendanceStatus, ExportFormat
from ..students.model import Student
from ..students.repository import StudentRepository
from .aggregation import ChartData, aggregate_attendance, attendance_rate, chart_window
from .builder import ExcelReportBuilder, ReportBuilder

logger = logging.getLogger(__name__)

BuilderFactory = Callable[..., ReportBuilder]


@dataclass(frozen=True)
class ExportPeriod:
    name: str
    start: date
    end: date

    @property
    def label(self) -> str:
        # '3months' -> '3 months'
        return re.sub(r"(\d+)", r"\1 ", self.name, count=1)

    def describe(self) -> str:
        return f"Period: {self.label} ({format_long_date(self.start)} - {format_long_date(self.end)})"

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def resolve_period(period: Optional[str], *, today: date) -> ExportPeriod:
    """Map a period preset to a date range ending today; unknown presets fall back to one month."""

    name = (period or "").strip() or DEFAULT_EXPORT_PERIOD
    if name not in EXPORT_PERIOD_MONTHS:
        logger.info("Unknown export period %r, using %s", period, DEFAULT_EXPORT_PERIOD)
        name = DEFAULT_EXPORT_PERIOD
    return ExportPeriod(name=name, start=subtract_months(today, EXPORT_PERIOD_MONTHS[name]), end=today)


def parse_export_format(value: Any) -> ExportFormat:
    if value is None or (isinstance(value, str) and not value.strip()):
        return ExportFormat.EXCEL
    return require_choice(str(value).strip().lower(), "format_type", ExportFormat)


@dataclass(frozen=True)
class AttendanceExport:
    period: ExportPeriod
    rows: Sequence[EnrichedAttendance]

    def to_dict(self) -> dict:
        return {
            "data": [r.to_dict() for r in self.rows],
            "period": self.period.name,
            "date_range": self.period.to_dict(),
        }


@dataclass(frozen=True)
class StudentExport:
    period: ExportPeriod
    students: Sequence[Student]
    as_of: date

    def age_of(self, student: Student) -> int:
        return age_in_years(student.date_of_birth, self.as_of)

    def to_dict(self) -> dict:
        data = []
        for s in self.students:
            item = s.to_dict()
            item["age"] = self.age_of(s)
            data.append(item)
        return {"data": data, "period": self.period.name, "date_range": self.period.to_dict()}


@dataclass(frozen=True)
class DashboardSummary:
    total_students: int
    total_classes: int
    today_present: int
    today_absent: int
    attendance_rate: int
    recent: Sequence[EnrichedAttendance]

    def to_dict(self) -> dict:
        return {
            "totalStudents": self.total_students,
            "totalClasses": self.total_classes,
            "todayPresent": self.today_present,
            "todayAbsent": self.today_absent,
            "attendanceRate": self.attendance_rate,
            "recentAttendance": [r.to_dict() for r in self.recent],
        }


@dataclass(frozen=True)
class RenderedReport:
    content: bytes
    filename: str
    media_type: str


class ReportService:
    """Charts, dashboard numbers and spreadsheet/JSON exports."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        classes: ClassRepository,
        *,
        school_name: str = DEFAULT_SCHOOL_NAME,
        default_chart_days: int = DEFAULT_CHART_DAYS,
        builder_factory: Optional[BuilderFactory] = None,
    ):
        self._attendance = attendance
        self._students = students
        self._classes = classes
        self._school_name = school_name
        self._default_chart_days = int(default_chart_days)
        self._builder_factory = builder_factory or ExcelReportBuilder

    # ----- charts / dashboard -----

    def chart_data(
        self,
        *,
        days: Any = None,
        class_id: Any = None,
        student_id: Any = None,
        today: Optional[date] = None,
    ) -> ChartData:
        window_days = (
            self._default_chart_days
            if days in (None, "")
            else require_int_range(days, "days", 0, MAX_CHART_DAYS)
        )

        start, end = chart_window(window_days, today=today or today_local())
        filters = AttendanceFilter(
            start_date=start,
            end_date=end,
            class_id=None if class_id in (None, "") else require_id(class_id, "class_id"),
            student_id=None if student_id in (None, "") else require_id(student_id, "student_id"),
            limit=None,
        )
        rows = self._attendance.list_filtered(filters, newest_first=False)
        return aggregate_attendance(rows)

    def dashboard_summary(self, *, today: Optional[date] = None) -> DashboardSummary:
        today = today or today_local()

        today_rows = self._attendance.list_filtered(AttendanceFilter(date=today, limit=None))
        counts = aggregate_attendance(today_rows).status_counts
        present = counts[AttendanceStatus.PRESENT]
        absent = counts[AttendanceStatus.ABSENT]

        recent = self._attendance.list_filtered(
            AttendanceFilter(
                start_date=today - timedelta(days=DASHBOARD_RECENT_DAYS),
                end_date=today,
                limit=DASHBOARD_RECENT_LIMIT,
            )
        )

        return DashboardSummary(
            total_students=self._students.count_all(),
            total_classes=self._classes.count_all(),
            today_present=present,
            today_absent=absent,
            attendance_rate=attendance_rate(present, absent),
            recent=recent,
        )

    # ----- exports -----

    def attendance_export(
        self,
        *,
        period: Optional[str] = None,
        class_id: Any = None,
        student_id: Any = None,
        today: Optional[date] = None,
    ) -> AttendanceExport:
        resolved = resolve_period(period, today=today or today_local())
        filters = AttendanceFilter(
            start_date=resolved.start,
            end_date=resolved.end,
            class_id=None if class_id in (None, "") else require_id(class_id, "class_id"),
            student_id=None if student_id in (None, "") else require_id(student_id, "student_id"),
            limit=None,
        )
        return AttendanceExport(period=resolved, rows=self._attendance.list_filtered(filters))

    def student_export(
        self,
        *,
        period: Optional[str] = None,
        class_id: Any = None,
        today: Optional[date] = None,
    ) -> StudentExport:
        today = today or today_local()
        cid = None if class_id in (None, "") else require_id(class_id, "class_id")
        return StudentExport(
            period=resolve_period(period, today=today),
            students=self._students.list_all(class_id=cid),
            as_of=today,
        )

    def render_attendance_report(self, export: AttendanceExport) -> RenderedReport:
        builder = self._builder_factory(
            sheet_title="Attendance Report",
            columns=5,
            max_column_width=ATTENDANCE_COLUMN_MAX_WIDTH,
        )
        builder.add_title(f"{self._school_name} - Attendance Report")
        builder.add_subtitle(export.period.describe())
        builder.add_blank_row()
        builder.add_header(["Student Name", "Class", "Grade", "Date", "Status"])

        for index, row in enumerate(export.rows):
            school_class = row.student.school_class
            builder.add_row(
                [
                    row.student.name,
                    school_class.class_name if school_class else "",
                    school_class.grade if school_class else "",
                    format_long_date(row.date),
                    row.status.value,
                ],
                shaded=index % 2 == 0,
                status=row.status,
                status_column=5,
            )

        if export.rows:
            counts = aggregate_attendance(export.rows).status_counts
            items = [(f"{status.value}:", counts[status]) for status in AttendanceStatus]
            items.append(("Total Records:", len(export.rows)))
            builder.add_summary("Summary Statistics", items)

        logger.info("Rendered attendance report (%s, %d rows)", export.period.name, len(export.rows))
        return RenderedReport(
            content=builder.finalize(),
            filename=f"attendance_report_{export.period.name}_{export.period.end.isoformat()}.xlsx",
            media_type=ExcelReportBuilder.media_type,
        )

    def render_student_report(self, export: StudentExport) -> RenderedReport:
        builder = self._builder_factory(
            sheet_title="Students List",
            columns=6,
            max_column_width=STUDENT_COLUMN_MAX_WIDTH,
            bordered=False,
        )
        builder.add_title(f"{self._school_name} - Students List")
        builder.add_blank_row()
        builder.add_header(["Student Name", "Class", "Grade", "Gender", "Date of Birth", "Age"])

        for index, student in enumerate(export.students):
            school_class = student.school_class
            builder.add_row(
                [
                    student.name,
                    school_class.class_name if school_class else "",
                    school_class.grade if school_class else "",
                    student.gender.value,
                    format_long_date(student.date_of_birth),
                    export.age_of(student),
                ],
                shaded=index % 2 == 0,
            )

        logger.info("Rendered student list (%d students)", len(export.students))
        return RenderedReport(
            content=builder.finalize(),
            filename=f"students_list_{export.as_of.isoformat()}.xlsx",
            media_type=ExcelReportBuilder.media_type,
        )
