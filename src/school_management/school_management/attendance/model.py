from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import AttendanceStatus
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance event for a (student, subject) pair."""

    attendance_id: int
    student: int
    subject: int
    date: datetime
    status: AttendanceStatus
    note: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "student": self.student,
            "subject": self.subject,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "note": self.note,
            "createdAt": isoformat_or_none(self.created_at),
            "updatedAt": isoformat_or_none(self.updated_at),
        }


@dataclass(frozen=True)
class AttendanceSummary:
    """Read-model: an attendance entry as listed on a student, with the subject name."""

    attendance_id: int
    subject_id: int
    subject_name: Optional[str]
    status: AttendanceStatus
    date: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "subject": {"id": self.subject_id, "name": self.subject_name},
            "status": self.status.value,
            "date": self.date.isoformat(),
        }


@dataclass(frozen=True)
class MarkedAttendance:
    """Result of marking attendance: the new record plus the updated student."""

    attendance: AttendanceRecord
    student: Student
    history: tuple[AttendanceSummary, ...]

    def student_dict(self) -> dict:
        data = self.student.to_dict()
        data["attendance"] = [h.to_dict() for h in self.history]
        return data
