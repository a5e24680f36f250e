from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from ..classes.model import SchoolClass
from ..core.enums import AttendanceStatus, Gender
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_placeholders
from ..students.model import Student
from .model import AttendanceFilter, AttendanceRecord, EnrichedAttendance, NewAttendance
from .repository import AttendanceRepository

_SELECT_ENRICHED = """
    SELECT
        a.attendance_id, a.student_id, a.date, a.status, a.created_at,
        s.name, s.class_id, s.gender, s.date_of_birth, s.created_at AS student_created_at,
        c.class_name, c.grade, c.created_at AS class_created_at
    FROM attendance a
    JOIN students s ON s.student_id = a.student_id
    JOIN classes c ON c.class_id = s.class_id
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        date=r["date"],
        status=AttendanceStatus(r["status"]),
        created_at=r.get("created_at"),
    )


def _to_enriched(r: dict) -> EnrichedAttendance:
    return EnrichedAttendance(
        record=_to_record(r),
        student=Student(
            student_id=int(r["student_id"]),
            name=r["name"],
            class_id=int(r["class_id"]),
            gender=Gender(r["gender"]),
            date_of_birth=r["date_of_birth"],
            created_at=r.get("student_created_at"),
            school_class=SchoolClass(
                class_id=int(r["class_id"]),
                class_name=r["class_name"],
                grade=int(r["grade"]),
                created_at=r.get("class_created_at"),
            ),
        ),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_filtered(self, filters: AttendanceFilter, *, newest_first: bool = True) -> Sequence[EnrichedAttendance]:
        clauses: list[str] = []
        params: list[object] = []

        if filters.student_id is not None:
            clauses.append("a.student_id=%s")
            params.append(int(filters.student_id))
        if filters.class_id is not None:
            clauses.append("s.class_id=%s")
            params.append(int(filters.class_id))
        if filters.date is not None:
            clauses.append("a.date=%s")
            params.append(filters.date)
        if filters.start_date is not None:
            clauses.append("a.date>=%s")
            params.append(filters.start_date)
        if filters.end_date is not None:
            clauses.append("a.date<=%s")
            params.append(filters.end_date)
        if filters.status is not None:
            clauses.append("a.status=%s")
            params.append(filters.status.value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        direction = "DESC" if newest_first else "ASC"
        order = f"ORDER BY a.date {direction}, a.created_at {direction}, a.attendance_id {direction}"

        page = ""
        if filters.limit is not None:
            page = "LIMIT %s OFFSET %s"
            params.extend([int(filters.limit), int(filters.offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT_ENRICHED} {where} {order} {page}", tuple(params))
            return [_to_enriched(r) for r in fetchall(cur)]

    def get_for_students_on_date(self, student_ids: Iterable[int], on_date: date) -> Sequence[AttendanceRecord]:
        ids = [int(i) for i in student_ids]
        if not ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, student_id, date, status, created_at
                FROM attendance
                WHERE student_id IN ({in_placeholders(len(ids))}) AND date=%s
                """,
                (*ids, on_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def upsert_many(self, records: Sequence[NewAttendance]) -> Sequence[EnrichedAttendance]:
        if not records:
            return []

        rows = [(r.student_id, r.date, r.status.value) for r in records]
        keys = [(r.student_id, r.date) for r in records]
        key_placeholders = ",".join(["(%s,%s)"] * len(keys))
        key_params = [value for key in keys for value in key]

        # Single transaction: a failing row rolls back the whole batch.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance(student_id, date, status)
                VALUES(%s,%s,%s) AS new
                ON DUPLICATE KEY UPDATE status=new.status
                """,
                rows,
            )
            cur.execute(
                f"{_SELECT_ENRICHED} WHERE (a.student_id, a.date) IN ({key_placeholders})",
                tuple(key_params),
            )
            by_key = {(row.record.student_id, row.record.date): row for row in map(_to_enriched, fetchall(cur))}

        return [by_key[key] for key in keys if key in by_key]
