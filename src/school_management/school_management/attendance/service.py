from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import Clock, day_range, now_local, start_of_day
from ..common.validators import optional_text, require_id
from ..core.enums import AttendanceStatus
from ..core.exceptions import BadRequestError, ConflictError, NotFoundError, ValidationError
from ..students.model import Student
from ..students.repository import StudentRepository
from ..subjects.repository import SubjectRepository
from .model import AttendanceRecord, AttendanceSummary, MarkedAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def parse_status(value: Any) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"status must be one of: {', '.join(AttendanceStatus.values())}")


class AttendanceService:
    """Use case: record daily attendance and keep the student's index in step.

    The student list of attendance ids is a denormalized back-reference; this
    service is the only writer and appends to it after the record exists.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        subjects: SubjectRepository,
        *,
        clock: Clock | None = None,
    ):
        self._attendance = attendance
        self._students = students
        self._subjects = subjects
        self._clock = clock or now_local

    def mark_attendance(
        self,
        *,
        student: Any,
        subject: Any,
        status: Any,
        note: Optional[str] = None,
        now: datetime | None = None,
    ) -> MarkedAttendance:
        if not student or not subject or not status:
            raise BadRequestError("student, subject, and status are required.")

        student_pk = require_id(student, "student")
        subject_pk = require_id(subject, "subject")
        status_value = parse_status(status)
        note_value = optional_text(note, "note")

        if not self._subjects.get_by_id(subject_pk):
            raise NotFoundError("Subject not found.")

        # DATETIME columns keep whole seconds; a rounded fraction could spill into the next day.
        now = (now or self._clock()).replace(microsecond=0)
        today = start_of_day(now)

        existing = self._attendance.find_since(student=student_pk, subject=subject_pk, since=today)
        if existing:
            logger.warning(
                "Duplicate attendance rejected student=%s subject=%s existing=%s",
                student_pk, subject_pk, existing.attendance_id,
            )
            raise ConflictError("Attendance already marked for today.")

        # The store's (student, subject, day) unique key settles any race past the check above.
        record = self._attendance.create(
            student=student_pk,
            subject=subject_pk,
            date=now,
            day_bucket=today.date(),
            status=status_value,
            note=note_value,
        )

        try:
            updated = None
            if self._students.append_attendance(student_pk, record.attendance_id):
                updated = self._students.get_by_id(student_pk)
        except Exception:
            self._attendance.delete_by_id(record.attendance_id)
            logger.exception("Failed to index attendance %s on student %s; record removed", record.attendance_id, student_pk)
            raise

        if not updated:
            self._attendance.delete_by_id(record.attendance_id)
            logger.warning(
                "Student %s missing while marking attendance; removed orphan record %s",
                student_pk, record.attendance_id,
            )
            raise NotFoundError("Student not found. Attendance record not created.")

        logger.info(
            "Marked attendance %s student=%s subject=%s status=%s",
            record.attendance_id, student_pk, subject_pk, status_value.value,
        )
        return MarkedAttendance(attendance=record, student=updated, history=tuple(self.history_for(updated)))

    def history_for(self, student: Student) -> list[AttendanceSummary]:
        """The student's attendance list expanded with subject names, in list order.

        Ids whose record no longer exists are skipped.
        """
        by_id = {r.attendance_id: r for r in self._attendance.get_many(student.attendance)}
        subjects = self._subjects.get_many({r.subject for r in by_id.values()})

        out: list[AttendanceSummary] = []
        for attendance_id in student.attendance:
            r = by_id.get(attendance_id)
            if r is None:
                continue
            subject = subjects.get(r.subject)
            out.append(
                AttendanceSummary(
                    attendance_id=r.attendance_id,
                    subject_id=r.subject,
                    subject_name=subject.name if subject else None,
                    status=r.status,
                    date=r.date,
                )
            )
        return out

    def student_history(self, student: Any) -> tuple[Student, list[AttendanceSummary]]:
        found = self._students.get_by_id(require_id(student, "student"))
        if not found:
            raise NotFoundError("Student not found")
        return found, self.history_for(found)

    def search(
        self,
        *,
        student: Any = None,
        subject: Any = None,
        day: Any = None,
    ) -> Sequence[AttendanceRecord]:
        start = end = None
        if day is not None:
            start, end = day_range(day)
        return self._attendance.search(
            student=require_id(student, "student") if student else None,
            subject=require_id(subject, "subject") if subject else None,
            start=start,
            end=end,
        )
