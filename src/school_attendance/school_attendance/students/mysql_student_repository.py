from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.exceptions import DuplicateIdentifierError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Student
from .repository import StudentRepository

_COLUMNS = "id, name, card_id, class, parent_phone, parent_email"


def _to_student(r: dict) -> Student:
    return Student(
        student_id=str(r["id"]),
        name=r["name"],
        card_id=r["card_id"],
        student_class=r.get("class"),
        parent_phone=r.get("parent_phone"),
        parent_email=r.get("parent_email"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY name")
            return [_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (student_id,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_card_id(self, card_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE card_id=%s", (card_id,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def create(self, student: Student) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO students(id, name, card_id, parent_phone, parent_email, class)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        student.student_id,
                        student.name,
                        student.card_id,
                        student.parent_phone,
                        student.parent_email,
                        student.student_class,
                    ),
                )
        except mysql_errors.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise DuplicateIdentifierError(
                    f"Card ID {student.card_id} is already assigned to another student"
                ) from exc
            raise

    def update(self, student: Student) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE students
                    SET name=%s, card_id=%s, parent_phone=%s, parent_email=%s, class=%s
                    WHERE id=%s
                    """,
                    (
                        student.name,
                        student.card_id,
                        student.parent_phone,
                        student.parent_email,
                        student.student_class,
                        student.student_id,
                    ),
                )
                return cur.rowcount > 0
        except mysql_errors.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise DuplicateIdentifierError(
                    f"Card ID {student.card_id} is already assigned to another student"
                ) from exc
            raise

    def delete_by_id(self, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=%s", (student_id,))
            return cur.rowcount > 0

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS count FROM students")
            r = fetchone(cur)
            return int(r["count"]) if r else 0
