from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, placeholders
from .model import Subject
from .repository import SubjectRepository


def _to_subject(row: dict) -> Subject:
    return Subject(subject_id=int(row["id"]), name=row["name"])


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM subjects WHERE id=%s", (int(subject_id),))
            row = fetchone(cur)
            return _to_subject(row) if row else None

    def get_by_name(self, name: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM subjects WHERE name=%s", (name,))
            row = fetchone(cur)
            return _to_subject(row) if row else None

    def get_many(self, subject_ids: Iterable[int]) -> Mapping[int, Subject]:
        ids = sorted({int(i) for i in subject_ids})
        if not ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT id, name FROM subjects WHERE id IN ({placeholders(len(ids))})", tuple(ids))
            return {int(r["id"]): _to_subject(r) for r in fetchall(cur)}

    def list_all(self) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM subjects ORDER BY name ASC")
            return [_to_subject(r) for r in fetchall(cur)]

    def create(self, *, name: str) -> Subject:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("INSERT INTO subjects(name) VALUES(%s)", (name,))
                return Subject(subject_id=int(cur.lastrowid), name=name)
        except mysql_errors.IntegrityError as e:
            if is_duplicate_key(e):
                raise ValidationError("Subject name already exists") from e
            raise
