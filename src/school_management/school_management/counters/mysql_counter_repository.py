from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import CounterRepository


class MySQLCounterRepository(CounterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def next_value(self, name: str) -> int:
        # LAST_INSERT_ID(expr) is per-connection, so the follow-up SELECT reads
        # exactly the value this statement produced.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO counters(name, seq) VALUES(%s, LAST_INSERT_ID(1))
                ON DUPLICATE KEY UPDATE seq = LAST_INSERT_ID(seq + 1)
                """,
                (name,),
            )
            cur.execute("SELECT LAST_INSERT_ID() AS seq")
            row = fetchone(cur)
            return int(row["seq"])
