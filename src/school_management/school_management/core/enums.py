from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status values accepted and stored as-is."""

    OTHER = "Other"
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]
