from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.constants import UPDATABLE_STUDENT_FIELDS
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json_list, fetchone, is_duplicate_key, load_json_list
from .model import Student
from .repository import StudentRepository

_COLUMNS = """
    id, student_id, name, email, password_hash, contact, parents_contact, address,
    current_std, role, is_verified, is_admitted, profile_image,
    subjects, batches, attendance, scores, admission_year, created_at, updated_at
"""

_JSON_FIELDS = {"batches"}


def _to_student(row: dict) -> Student:
    return Student(
        id=int(row["id"]),
        student_id=row["student_id"],
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        contact=row["contact"],
        address=row["address"],
        admission_year=int(row["admission_year"]),
        parents_contact=tuple(load_json_list(row.get("parents_contact"))),
        current_std=row.get("current_std") or "",
        role=row.get("role") or "student",
        is_verified=bool(row.get("is_verified")),
        is_admitted=bool(row.get("is_admitted")),
        profile_image=row.get("profile_image") or "",
        subjects=tuple(int(i) for i in load_json_list(row.get("subjects"))),
        batches=tuple(int(i) for i in load_json_list(row.get("batches"))),
        attendance=tuple(int(i) for i in load_json_list(row.get("attendance"))),
        scores=tuple(int(i) for i in load_json_list(row.get("scores"))),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _duplicate_message(exc: Exception) -> str:
    msg = str(exc)
    if "uq_students_student_id" in msg:
        return "studentId already exists"
    return "Email already in use"


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_pk: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (int(student_pk),))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_email(self, email: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def create(
        self,
        *,
        student_id: str,
        name: str,
        email: str,
        password_hash: str,
        contact: str,
        address: str,
        admission_year: int,
        parents_contact: Sequence[str] = (),
        current_std: str = "",
        subjects: Sequence[int] = (),
        batches: Sequence[int] = (),
    ) -> Student:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO students(
                        student_id, name, email, password_hash, contact, parents_contact, address,
                        current_std, subjects, batches, attendance, scores, admission_year
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,JSON_ARRAY(),JSON_ARRAY(),%s)
                    """,
                    (
                        student_id,
                        name,
                        email,
                        password_hash,
                        contact,
                        dump_json_list(parents_contact),
                        address,
                        current_std,
                        dump_json_list(subjects),
                        dump_json_list(batches),
                        int(admission_year),
                    ),
                )
                new_id = int(cur.lastrowid)
                cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (new_id,))
                return _to_student(fetchone(cur))
        except mysql_errors.IntegrityError as e:
            if is_duplicate_key(e):
                raise ValidationError(_duplicate_message(e)) from e
            raise

    def update_fields(self, student_pk: int, fields: Mapping[str, Any]) -> bool:
        unknown = set(fields) - set(UPDATABLE_STUDENT_FIELDS)
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        if not fields:
            return self.get_by_id(student_pk) is not None

        assignments = []
        params: list[object] = []
        for name in UPDATABLE_STUDENT_FIELDS:
            if name not in fields:
                continue
            assignments.append(f"{name}=%s")
            params.append(dump_json_list(fields[name]) if name in _JSON_FIELDS else fields[name])
        params.append(int(student_pk))

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"UPDATE students SET {', '.join(assignments)} WHERE id=%s", tuple(params))
                if cur.rowcount > 0:
                    return True
                # rowcount is 0 both for a missing row and an unchanged one
                cur.execute("SELECT 1 AS found FROM students WHERE id=%s", (int(student_pk),))
                return fetchone(cur) is not None
        except mysql_errors.IntegrityError as e:
            if is_duplicate_key(e):
                raise ValidationError(_duplicate_message(e)) from e
            raise

    def append_attendance(self, student_pk: int, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET attendance = JSON_ARRAY_APPEND(COALESCE(attendance, JSON_ARRAY()), '$', %s)
                WHERE id=%s
                """,
                (int(attendance_id), int(student_pk)),
            )
            return cur.rowcount > 0
