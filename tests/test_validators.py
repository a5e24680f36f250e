from __future__ import annotations

from datetime import date

import pytest

from src.school_attendance.school_attendance.attendance.service import (
    build_attendance_filter,
    validate_attendance,
    validate_bulk_attendance,
)
from src.school_attendance.school_attendance.classes.service import validate_class
from src.school_attendance.school_attendance.common.validators import require_int
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, Gender
from src.school_attendance.school_attendance.core.exceptions import ValidationError
from src.school_attendance.school_attendance.students.service import validate_student


def test_valid_class_is_trimmed():
    payload = validate_class(class_name="  3A ", grade="3")
    assert payload.class_name == "3A"
    assert payload.grade == 3


@pytest.mark.parametrize(
    "class_name, grade, field",
    [
        ("", 3, "class_name"),
        ("x" * 51, 3, "class_name"),
        ("3A", 0, "grade"),
        ("3A", 13, "grade"),
        ("3A", "three", "grade"),
    ],
)
def test_invalid_class_names_the_field(class_name, grade, field):
    with pytest.raises(ValidationError) as exc:
        validate_class(class_name=class_name, grade=grade)
    assert field in str(exc.value)


def test_valid_student(fixed_today):
    payload = validate_student(
        name="Alice Brown",
        class_id=1,
        gender="Female",
        date_of_birth="2016-02-29",
        today=fixed_today,
    )
    assert payload.gender is Gender.FEMALE
    assert payload.date_of_birth == date(2016, 2, 29)


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"name": "A"}, "name"),
        ({"name": "x" * 101}, "name"),
        ({"class_id": 0}, "class_id"),
        ({"gender": "Other"}, "gender"),
        ({"date_of_birth": "2016-13-01"}, "date_of_birth"),
        ({"date_of_birth": "2024-03-16"}, "date_of_birth"),
    ],
)
def test_invalid_student_names_the_field(fixed_today, overrides, field):
    data = {"name": "Alice", "class_id": 1, "gender": "Female", "date_of_birth": "2016-01-01"}
    data.update(overrides)
    with pytest.raises(ValidationError) as exc:
        validate_student(today=fixed_today, **data)
    assert field in str(exc.value)


def test_date_of_birth_today_is_allowed(fixed_today):
    payload = validate_student(
        name="Newborn", class_id=1, gender="Male", date_of_birth=fixed_today.isoformat(), today=fixed_today
    )
    assert payload.date_of_birth == fixed_today


def test_valid_attendance():
    record = validate_attendance(student_id="4", date="2024-01-01", status="Late")
    assert record.student_id == 4
    assert record.status is AttendanceStatus.LATE


def test_attendance_status_is_case_sensitive():
    with pytest.raises(ValidationError) as exc:
        validate_attendance(student_id=1, date="2024-01-01", status="present")
    assert "status" in str(exc.value)


def test_bulk_requires_records():
    with pytest.raises(ValidationError) as exc:
        validate_bulk_attendance(date="2024-01-01", records=[])
    assert "records" in str(exc.value)


def test_bulk_names_the_offending_item():
    with pytest.raises(ValidationError) as exc:
        validate_bulk_attendance(
            date="2024-01-01",
            records=[{"student_id": 1, "status": "Present"}, {"student_id": 2, "status": "Sick"}],
        )
    assert "records[1].status" in str(exc.value)


def test_bulk_stamps_shared_date():
    batch = validate_bulk_attendance(
        date="2024-01-02",
        records=[{"student_id": 1, "status": "Present"}, {"student_id": 2, "status": "Absent"}],
    )
    assert [r.date for r in batch] == [date(2024, 1, 2), date(2024, 1, 2)]


def test_filter_defaults_and_bounds():
    filters = build_attendance_filter()
    assert filters.limit == 100
    assert filters.offset == 0

    with pytest.raises(ValidationError):
        build_attendance_filter(limit="0")
    with pytest.raises(ValidationError):
        build_attendance_filter(offset="-1")
    with pytest.raises(ValidationError):
        build_attendance_filter(status="Sick")


@pytest.mark.parametrize("value", ["--5", "²", "1_000", "1.5", "", " ", "5-", True])
def test_malformed_integers_are_validation_errors(value):
    with pytest.raises(ValidationError) as exc:
        require_int(value, "limit")
    assert "limit" in str(exc.value)


@pytest.mark.parametrize("value, expected", [("42", 42), (" -3 ", -3), (7, 7), (2.0, 2)])
def test_integers_from_query_strings(value, expected):
    assert require_int(value, "offset") == expected
