from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SchoolClass
from .repository import ClassRepository


def _to_class(r: dict) -> SchoolClass:
    return SchoolClass(
        class_id=int(r["class_id"]),
        class_name=r["class_name"],
        grade=int(r["grade"]),
        created_at=r.get("created_at"),
    )


def _raise_if_duplicate(e: mysql.connector.IntegrityError) -> None:
    # uq_classes_name_grade lost a race with find_duplicate
    if e.errno == errorcode.ER_DUP_ENTRY:
        raise ConflictError("Class with this name already exists for this grade") from e


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT class_id, class_name, grade, created_at
                FROM classes
                ORDER BY grade ASC, class_name ASC
                """
            )
            return [_to_class(r) for r in fetchall(cur)]

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT class_id, class_name, grade, created_at FROM classes WHERE class_id=%s",
                (int(class_id),),
            )
            r = fetchone(cur)
            return _to_class(r) if r else None

    def find_duplicate(self, *, class_name: str, grade: int, exclude_id: Optional[int] = None) -> Optional[int]:
        clauses = ["class_name=%s", "grade=%s"]
        params: list[object] = [class_name, int(grade)]
        if exclude_id is not None:
            clauses.append("class_id<>%s")
            params.append(int(exclude_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT class_id FROM classes WHERE {' AND '.join(clauses)} LIMIT 1",
                tuple(params),
            )
            r = fetchone(cur)
            return int(r["class_id"]) if r else None

    def create(self, *, class_name: str, grade: int) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO classes(class_name, grade) VALUES(%s,%s)",
                    (class_name, int(grade)),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            _raise_if_duplicate(e)
            raise

    def update(self, *, class_id: int, class_name: str, grade: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "UPDATE classes SET class_name=%s, grade=%s WHERE class_id=%s",
                    (class_name, int(grade), int(class_id)),
                )
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as e:
            _raise_if_duplicate(e)
            raise

    def delete(self, class_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM classes WHERE class_id=%s", (int(class_id),))
            return cur.rowcount > 0

    def has_students(self, class_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id FROM students WHERE class_id=%s LIMIT 1", (int(class_id),))
            return fetchone(cur) is not None

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM classes")
            r = fetchone(cur)
            return int(r["total"]) if r else 0
