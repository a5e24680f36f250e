from __future__ import annotations

import io
from datetime import date, timedelta

import pytest
from openpyxl import load_workbook

from src.school_attendance.school_attendance.common.datetime_utils import subtract_months
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, ExportFormat, Gender
from src.school_attendance.school_attendance.core.exceptions import ValidationError
from src.school_attendance.school_attendance.reports.service import parse_export_format, resolve_period


@pytest.fixture
def school(store, fixed_today):
    c = store.add_class("3A", 3)
    alice = store.add_student("Alice", c.class_id, gender=Gender.FEMALE, date_of_birth=date(2016, 3, 16))
    bob = store.add_student("Bob", c.class_id, date_of_birth=date(2015, 3, 15))
    store.add_attendance(alice.student_id, fixed_today - timedelta(days=2), AttendanceStatus.PRESENT)
    store.add_attendance(bob.student_id, fixed_today - timedelta(days=2), AttendanceStatus.ABSENT)
    store.add_attendance(alice.student_id, fixed_today - timedelta(days=1), AttendanceStatus.LATE)
    # outside every window except 6 months / 1 year
    store.add_attendance(bob.student_id, date(2023, 11, 1), AttendanceStatus.EXCUSED)
    return {"class": c, "alice": alice, "bob": bob}


def _sheet(content: bytes):
    return load_workbook(io.BytesIO(content)).active


@pytest.mark.parametrize(
    "period, months",
    [("1month", 1), ("3months", 3), ("6months", 6), ("semester", 6), ("1year", 12)],
)
def test_resolve_period(period, months):
    today = date(2024, 3, 31)
    resolved = resolve_period(period, today=today)
    assert resolved.end == today
    assert resolved.start == subtract_months(today, months)


def test_unknown_period_falls_back_to_one_month():
    resolved = resolve_period("fortnight", today=date(2024, 3, 31))
    assert resolved.name == "1month"
    assert resolved.start == date(2024, 2, 29)


def test_export_format():
    assert parse_export_format(None) is ExportFormat.EXCEL
    assert parse_export_format("JSON") is ExportFormat.JSON
    with pytest.raises(ValidationError):
        parse_export_format("csv")


def test_attendance_export_json_shape(container, school, fixed_today):
    export = container.report_service.attendance_export(period="1month", today=fixed_today).to_dict()

    assert export["period"] == "1month"
    assert export["date_range"] == {"start": "2024-02-15", "end": "2024-03-15"}
    assert len(export["data"]) == 3
    assert export["data"][0]["status"] == "Late"


def test_attendance_workbook_layout(container, school, fixed_today):
    export = container.report_service.attendance_export(period="1month", today=fixed_today)
    report = container.report_service.render_attendance_report(export)
    ws = _sheet(report.content)

    assert report.filename == "attendance_report_1month_2024-03-15.xlsx"
    assert ws["A1"].value == "Sunshine Elementary School - Attendance Report"
    assert ws["A2"].value == "Period: 1 month (Feb 15, 2024 - Mar 15, 2024)"
    assert [ws.cell(row=4, column=c).value for c in range(1, 6)] == [
        "Student Name", "Class", "Grade", "Date", "Status",
    ]
    assert ws["A4"].fill.start_color.rgb.endswith("4472C4")

    # newest first: Late, then the two rows from 2024-03-13
    assert ws["E5"].value == "Late"
    assert ws["E5"].font.color.rgb.endswith("FFA500")
    assert ws["A5"].fill.start_color.rgb.endswith("F2F2F2")
    assert ws["E6"].font.color.rgb.endswith("FF0000")
    assert ws["E7"].font.color.rgb.endswith("008000")

    labels = {ws.cell(row=r, column=1).value: ws.cell(row=r, column=2).value for r in range(9, ws.max_row + 1)}
    assert labels["Present:"] == 1
    assert labels["Absent:"] == 1
    assert labels["Late:"] == 1
    assert labels["Excused:"] == 0
    assert labels["Total Records:"] == 3


def test_attendance_workbook_widths_are_capped(container, store, fixed_today):
    c = store.add_class("3A", 3)
    s = store.add_student("N" * 80, c.class_id)
    store.add_attendance(s.student_id, fixed_today, AttendanceStatus.PRESENT)

    export = container.report_service.attendance_export(today=fixed_today)
    ws = _sheet(container.report_service.render_attendance_report(export).content)

    assert ws.column_dimensions["A"].width == 50


def test_empty_attendance_workbook_has_no_summary(container, fixed_today):
    export = container.report_service.attendance_export(today=fixed_today)
    ws = _sheet(container.report_service.render_attendance_report(export).content)

    assert ws.max_row == 4


def test_student_export_ages(container, school, fixed_today):
    data = container.report_service.student_export(today=fixed_today).to_dict()["data"]

    ages = {s["name"]: s["age"] for s in data}
    assert ages == {"Alice": 7, "Bob": 9}


def test_student_workbook(container, school, fixed_today):
    export = container.report_service.student_export(class_id=school["class"].class_id, today=fixed_today)
    report = container.report_service.render_student_report(export)
    ws = _sheet(report.content)

    assert report.filename == "students_list_2024-03-15.xlsx"
    assert ws["A1"].value == "Sunshine Elementary School - Students List"
    assert ws["F3"].value == "Age"
    assert ws["A4"].value == "Alice"
    assert ws["E4"].value == "Mar 16, 2016"
    assert all(ws.column_dimensions[col].width <= 30 for col in "ABCDEF")


def test_dashboard_summary(container, store, school, fixed_today):
    store.add_attendance(school["alice"].student_id, fixed_today, AttendanceStatus.PRESENT)
    store.add_attendance(school["bob"].student_id, fixed_today, AttendanceStatus.ABSENT)

    summary = container.report_service.dashboard_summary(today=fixed_today).to_dict()

    assert summary["totalStudents"] == 2
    assert summary["totalClasses"] == 1
    assert (summary["todayPresent"], summary["todayAbsent"]) == (1, 1)
    assert summary["attendanceRate"] == 50
    # 2023-11-01 is outside the 7 day window
    assert len(summary["recentAttendance"]) == 5


def test_chart_data_window_and_filters(container, school, fixed_today):
    chart = container.report_service.chart_data(days="30", today=fixed_today).to_dict()
    assert chart["statusCounts"] == {"Present": 1, "Absent": 1, "Late": 1, "Excused": 0}
    assert [t["date"] for t in chart["trends"]] == ["2024-03-13", "2024-03-14"]

    only_bob = container.report_service.chart_data(
        days=365, student_id=school["bob"].student_id, today=fixed_today
    ).to_dict()
    assert only_bob["statusCounts"]["Excused"] == 1
    assert only_bob["statusCounts"]["Absent"] == 1


def test_chart_days_are_bounded(container, fixed_today):
    with pytest.raises(ValidationError) as exc:
        container.report_service.chart_data(days=1_000_000, today=fixed_today)
    assert "days" in str(exc.value)

    with pytest.raises(ValidationError):
        container.report_service.chart_data(days="-1", today=fixed_today)

    # the largest allowed window still resolves to a date
    chart = container.report_service.chart_data(days=3650, today=fixed_today)
    assert chart.trends == []


def test_only_attendance_workbook_is_bordered(container, school, fixed_today):
    attendance = _sheet(
        container.report_service.render_attendance_report(
            container.report_service.attendance_export(today=fixed_today)
        ).content
    )
    students = _sheet(
        container.report_service.render_student_report(
            container.report_service.student_export(today=fixed_today)
        ).content
    )

    assert attendance["A4"].border.left.style == "thin"
    assert attendance["E5"].border.bottom.style == "thin"
    assert students["A3"].border.left.style is None
    assert students["A4"].border.left.style is None
