from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def find_since(self, *, student: int, subject: int, since: datetime) -> Optional[AttendanceRecord]:
        """First record for (student, subject) whose date is >= ``since``."""

        raise NotImplementedError

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
        """Insert one record.

        Raises ConflictError when (student, subject, day_bucket) already exists.
        """

        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def get_many(self, attendance_ids: Iterable[int]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def search(
        self,
        *,
        student: Optional[int] = None,
        subject: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records matching every given filter, newest first. ``end`` is exclusive."""

        raise NotImplementedError
