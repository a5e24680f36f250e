from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence, Set

from ..classes.model import SchoolClass
from ..core.enums import Gender
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders
from .model import Student
from .repository import StudentRepository

_SELECT_STUDENT = """
    SELECT
        s.student_id, s.name, s.class_id, s.gender, s.date_of_birth, s.created_at,
        c.class_name, c.grade, c.created_at AS class_created_at
    FROM students s
    JOIN classes c ON c.class_id = s.class_id
"""


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        name=r["name"],
        class_id=int(r["class_id"]),
        gender=Gender(r["gender"]),
        date_of_birth=r["date_of_birth"],
        created_at=r.get("created_at"),
        school_class=SchoolClass(
            class_id=int(r["class_id"]),
            class_name=r["class_name"],
            grade=int(r["grade"]),
            created_at=r.get("class_created_at"),
        ),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, class_id: Optional[int] = None) -> Sequence[Student]:
        where = ""
        params: tuple = ()
        if class_id is not None:
            where = "WHERE s.class_id=%s"
            params = (int(class_id),)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT_STUDENT} {where} ORDER BY s.name ASC, s.student_id ASC", params)
            return [_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT_STUDENT} WHERE s.student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def existing_ids(self, student_ids: Iterable[int]) -> Set[int]:
        ids = [int(i) for i in student_ids]
        if not ids:
            return set()

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT student_id FROM students WHERE student_id IN ({in_placeholders(len(ids))})",
                tuple(ids),
            )
            return {int(r["student_id"]) for r in fetchall(cur)}

    def create(self, *, name: str, class_id: int, gender: Gender, date_of_birth: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(name, class_id, gender, date_of_birth)
                VALUES(%s,%s,%s,%s)
                """,
                (name, int(class_id), gender.value, date_of_birth),
            )
            return int(cur.lastrowid)

    def update(self, *, student_id: int, name: str, class_id: int, gender: Gender, date_of_birth: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET name=%s, class_id=%s, gender=%s, date_of_birth=%s
                WHERE student_id=%s
                """,
                (name, int(class_id), gender.value, date_of_birth, int(student_id)),
            )
            return cur.rowcount > 0

    def delete(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM students")
            r = fetchone(cur)
            return int(r["total"]) if r else 0
