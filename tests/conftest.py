from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

import pytest

from src.school_attendance.school_attendance.attendance.model import (
    AttendanceFilter,
    AttendanceRecord,
    EnrichedAttendance,
    NewAttendance,
)
from src.school_attendance.school_attendance.classes.model import SchoolClass
from src.school_attendance.school_attendance.container import assemble_container
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, Gender
from src.school_attendance.school_attendance.students.model import Student

FIXED_TODAY = date(2024, 3, 15)


class InMemoryStore:
    """Shared tables for the in-memory repositories (mimics FK joins and cascades)."""

    def __init__(self):
        self.classes: dict[int, SchoolClass] = {}
        self.students: dict[int, Student] = {}
        self.attendance: dict[tuple[int, date], AttendanceRecord] = {}
        self._ids = {"class": 0, "student": 0, "attendance": 0}
        self._clock = datetime(2024, 1, 1, 8, 0)

    def next_id(self, kind: str) -> int:
        self._ids[kind] += 1
        return self._ids[kind]

    def tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    # helpers for arranging test data

    def add_class(self, class_name: str, grade: int) -> SchoolClass:
        cid = self.next_id("class")
        self.classes[cid] = SchoolClass(class_id=cid, class_name=class_name, grade=grade, created_at=self.tick())
        return self.classes[cid]

    def add_student(
        self,
        name: str,
        class_id: int,
        *,
        gender: Gender = Gender.MALE,
        date_of_birth: date = date(2016, 5, 1),
    ) -> Student:
        sid = self.next_id("student")
        self.students[sid] = Student(
            student_id=sid,
            name=name,
            class_id=class_id,
            gender=gender,
            date_of_birth=date_of_birth,
            created_at=self.tick(),
        )
        return self.joined_student(sid)

    def add_attendance(self, student_id: int, on_date: date, status: AttendanceStatus) -> AttendanceRecord:
        aid = self.next_id("attendance")
        rec = AttendanceRecord(
            attendance_id=aid,
            student_id=student_id,
            date=on_date,
            status=status,
            created_at=self.tick(),
        )
        self.attendance[(student_id, on_date)] = rec
        return rec

    def joined_student(self, student_id: int) -> Optional[Student]:
        s = self.students.get(student_id)
        if s is None:
            return None
        return Student(
            student_id=s.student_id,
            name=s.name,
            class_id=s.class_id,
            gender=s.gender,
            date_of_birth=s.date_of_birth,
            created_at=s.created_at,
            school_class=self.classes.get(s.class_id),
        )


class InMemoryClasses:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def list_all(self):
        return sorted(self._store.classes.values(), key=lambda c: (c.grade, c.class_name))

    def get_by_id(self, class_id: int):
        return self._store.classes.get(class_id)

    def find_duplicate(self, *, class_name: str, grade: int, exclude_id=None):
        for c in self._store.classes.values():
            if c.class_name == class_name and c.grade == grade and c.class_id != exclude_id:
                return c.class_id
        return None

    def create(self, *, class_name: str, grade: int) -> int:
        return self._store.add_class(class_name, grade).class_id

    def update(self, *, class_id: int, class_name: str, grade: int) -> bool:
        old = self._store.classes.get(class_id)
        if old is None:
            return False
        self._store.classes[class_id] = SchoolClass(
            class_id=class_id, class_name=class_name, grade=grade, created_at=old.created_at
        )
        return True

    def delete(self, class_id: int) -> bool:
        return self._store.classes.pop(class_id, None) is not None

    def has_students(self, class_id: int) -> bool:
        return any(s.class_id == class_id for s in self._store.students.values())

    def count_all(self) -> int:
        return len(self._store.classes)


class InMemoryStudents:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def list_all(self, *, class_id=None):
        rows = [
            self._store.joined_student(s.student_id)
            for s in self._store.students.values()
            if class_id is None or s.class_id == class_id
        ]
        return sorted(rows, key=lambda s: (s.name, s.student_id))

    def get_by_id(self, student_id: int):
        return self._store.joined_student(student_id)

    def existing_ids(self, student_ids: Iterable[int]):
        return {i for i in student_ids if i in self._store.students}

    def create(self, *, name, class_id, gender, date_of_birth) -> int:
        return self._store.add_student(name, class_id, gender=gender, date_of_birth=date_of_birth).student_id

    def update(self, *, student_id, name, class_id, gender, date_of_birth) -> bool:
        old = self._store.students.get(student_id)
        if old is None:
            return False
        self._store.students[student_id] = Student(
            student_id=student_id,
            name=name,
            class_id=class_id,
            gender=gender,
            date_of_birth=date_of_birth,
            created_at=old.created_at,
        )
        return True

    def delete(self, student_id: int) -> bool:
        if self._store.students.pop(student_id, None) is None:
            return False
        for key in [k for k in self._store.attendance if k[0] == student_id]:
            del self._store.attendance[key]
        return True

    def count_all(self) -> int:
        return len(self._store.students)


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._store = store
        self.upsert_calls = 0

    def _enrich(self, rec: AttendanceRecord) -> EnrichedAttendance:
        return EnrichedAttendance(record=rec, student=self._store.joined_student(rec.student_id))

    def list_filtered(self, filters: AttendanceFilter, *, newest_first: bool = True):
        rows = []
        for rec in self._store.attendance.values():
            student = self._store.students[rec.student_id]
            if filters.student_id is not None and rec.student_id != filters.student_id:
                continue
            if filters.class_id is not None and student.class_id != filters.class_id:
                continue
            if filters.date is not None and rec.date != filters.date:
                continue
            if filters.start_date is not None and rec.date < filters.start_date:
                continue
            if filters.end_date is not None and rec.date > filters.end_date:
                continue
            if filters.status is not None and rec.status != filters.status:
                continue
            rows.append(rec)

        rows.sort(key=lambda r: (r.date, r.created_at, r.attendance_id), reverse=newest_first)
        if filters.limit is not None:
            rows = rows[filters.offset : filters.offset + filters.limit]
        return [self._enrich(r) for r in rows]

    def get_for_students_on_date(self, student_ids, on_date: date):
        return [
            self._store.attendance[(sid, on_date)]
            for sid in student_ids
            if (sid, on_date) in self._store.attendance
        ]

    def upsert_many(self, records: list[NewAttendance]):
        self.upsert_calls += 1
        out = []
        for r in records:
            existing = self._store.attendance.get((r.student_id, r.date))
            if existing is None:
                rec = self._store.add_attendance(r.student_id, r.date, r.status)
            else:
                rec = AttendanceRecord(
                    attendance_id=existing.attendance_id,
                    student_id=existing.student_id,
                    date=existing.date,
                    status=r.status,
                    created_at=existing.created_at,
                )
                self._store.attendance[(r.student_id, r.date)] = rec
            out.append(self._enrich(rec))
        return out


@pytest.fixture
def fixed_today() -> date:
    return FIXED_TODAY


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def classes_repo(store):
    return InMemoryClasses(store)


@pytest.fixture
def students_repo(store):
    return InMemoryStudents(store)


@pytest.fixture
def attendance_repo(store):
    return InMemoryAttendance(store)


@pytest.fixture
def container(classes_repo, students_repo, attendance_repo):
    return assemble_container(
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
    )
