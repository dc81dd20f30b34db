from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional

from mysql.connector import errors as mysql_errors

from ..core.constants import ER_DUP_ENTRY
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_duplicate_key(exc: Exception) -> bool:
    return isinstance(exc, mysql_errors.IntegrityError) and getattr(exc, "errno", None) == ER_DUP_ENTRY


def load_json_list(value: Any) -> list:
    """Decode a JSON column into a list.

    mysql-connector can return JSON as:
    - str
    - bytes / bytearray
    - an already-decoded list (C extension with converters)
    """

    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        decoded = json.loads(value) if value.strip() else []
        if not isinstance(decoded, list):
            raise ValueError(f"Expected JSON array, got {type(decoded).__name__}")
        return decoded
    raise TypeError(f"Unsupported JSON column value type: {type(value)!r}")


def dump_json_list(values: Iterable[Any]) -> str:
    return json.dumps(list(values))


def placeholders(count: int) -> str:
    return ",".join(["%s"] * count)
