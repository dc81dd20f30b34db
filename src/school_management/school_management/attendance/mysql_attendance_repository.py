from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, placeholders
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, student_id, subject_id, date, status, note, created_at, updated_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        student=int(r["student_id"]),
        subject=int(r["subject_id"]),
        date=r["date"],
        status=AttendanceStatus(r["status"]),
        note=r.get("note") or "",
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_since(self, *, student: int, subject: int, since: datetime) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE student_id=%s AND subject_id=%s AND date >= %s
                ORDER BY date ASC
                LIMIT 1
                """,
                (int(student), int(subject), since),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(
        self,
        *,
        student: int,
        subject: int,
        date: datetime,
        day_bucket: date,
        status: AttendanceStatus,
        note: str = "",
    ) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(student_id, subject_id, date, day_bucket, status, note)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(student), int(subject), date, day_bucket, status.value, note),
                )
                new_id = int(cur.lastrowid)
                cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (new_id,))
                return _to_record(fetchone(cur))
        except mysql_errors.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("Attendance already marked for today.") from e
            raise

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def get_many(self, attendance_ids: Iterable[int]) -> Sequence[AttendanceRecord]:
        ids = [int(i) for i in attendance_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE id IN ({placeholders(len(ids))})",
                tuple(ids),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def search(
        self,
        *,
        student: Optional[int] = None,
        subject: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if student is not None:
            clauses.append("student_id=%s")
            params.append(int(student))
        if subject is not None:
            clauses.append("subject_id=%s")
            params.append(int(subject))
        if start is not None:
            clauses.append("date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("date < %s")
            params.append(end)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                {where}
                ORDER BY date DESC, id DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
