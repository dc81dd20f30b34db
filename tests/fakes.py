"""In-memory repositories standing in for MySQL in service and controller tests."""
from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from src.school_management.school_management.attendance.model import AttendanceRecord
from src.school_management.school_management.core.exceptions import ConflictError, ValidationError
from src.school_management.school_management.students.model import Student
from src.school_management.school_management.subjects.model import Subject

FIXED_NOW = datetime(2024, 3, 14, 9, 30, 0)


class InMemoryCounters:
    def __init__(self):
        self._seq: dict[str, int] = {}
        self._lock = threading.Lock()

    def next_value(self, name: str) -> int:
        with self._lock:
            self._seq[name] = self._seq.get(name, 0) + 1
            return self._seq[name]


class InMemoryStudents:
    def __init__(self):
        self._by_id: dict[int, Student] = {}
        self._id = 0

    def get_by_id(self, student_pk: int) -> Optional[Student]:
        return self._by_id.get(int(student_pk))

    def get_by_email(self, email: str) -> Optional[Student]:
        return next((s for s in self._by_id.values() if s.email == email), None)

    def create(self, *, student_id, name, email, password_hash, contact, address, admission_year,
               parents_contact=(), current_std="", subjects=(), batches=()) -> Student:
        if self.get_by_email(email):
            raise ValidationError("Email already in use")
        self._id += 1
        student = Student(
            id=self._id,
            student_id=student_id,
            name=name,
            email=email,
            password_hash=password_hash,
            contact=contact,
            address=address,
            admission_year=admission_year,
            parents_contact=tuple(parents_contact),
            current_std=current_std,
            subjects=tuple(subjects),
            batches=tuple(batches),
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        self._by_id[student.id] = student
        return student

    def update_fields(self, student_pk: int, fields) -> bool:
        current = self._by_id.get(int(student_pk))
        if not current:
            return False
        changes = dict(fields)
        if "batches" in changes:
            changes["batches"] = tuple(changes["batches"])
        self._by_id[current.id] = replace(current, **changes)
        return True

    def append_attendance(self, student_pk: int, attendance_id: int) -> bool:
        current = self._by_id.get(int(student_pk))
        if not current:
            return False
        self._by_id[current.id] = replace(current, attendance=current.attendance + (int(attendance_id),))
        return True

    def delete(self, student_pk: int) -> None:
        self._by_id.pop(int(student_pk), None)


class InMemorySubjects:
    def __init__(self):
        self._by_id: dict[int, Subject] = {}
        self._id = 0

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        return self._by_id.get(int(subject_id))

    def get_by_name(self, name: str) -> Optional[Subject]:
        return next((s for s in self._by_id.values() if s.name == name), None)

    def get_many(self, subject_ids):
        return {int(i): self._by_id[int(i)] for i in subject_ids if int(i) in self._by_id}

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda s: s.name)

    def create(self, *, name: str) -> Subject:
        if self.get_by_name(name):
            raise ValidationError("Subject name already exists")
        self._id += 1
        subject = Subject(subject_id=self._id, name=name)
        self._by_id[subject.subject_id] = subject
        return subject


class InMemoryAttendance:
    """Mirrors the store's unique key on (student, subject, day_bucket)."""

    def __init__(self):
        self._by_id: dict[int, AttendanceRecord] = {}
        self._buckets: dict[tuple[int, int, date], int] = {}
        self._id = 0
        self.deleted: list[int] = []

    def find_since(self, *, student: int, subject: int, since: datetime) -> Optional[AttendanceRecord]:
        matches = [
            r for r in self._by_id.values()
            if r.student == student and r.subject == subject and r.date >= since
        ]
        return min(matches, key=lambda r: r.date) if matches else None

    def create(self, *, student, subject, date, day_bucket, status, note="") -> AttendanceRecord:
        key = (int(student), int(subject), day_bucket)
        if key in self._buckets:
            raise ConflictError("Attendance already marked for today.")
        self._id += 1
        record = AttendanceRecord(
            attendance_id=self._id,
            student=int(student),
            subject=int(subject),
            date=date,
            status=status,
            note=note,
            created_at=date,
            updated_at=date,
        )
        self._by_id[record.attendance_id] = record
        self._buckets[key] = record.attendance_id
        return record

    def delete_by_id(self, attendance_id: int) -> bool:
        record = self._by_id.pop(int(attendance_id), None)
        if not record:
            return False
        self._buckets = {k: v for k, v in self._buckets.items() if v != record.attendance_id}
        self.deleted.append(record.attendance_id)
        return True

    def get_many(self, attendance_ids):
        return [self._by_id[int(i)] for i in attendance_ids if int(i) in self._by_id]

    def search(self, *, student=None, subject=None, start=None, end=None):
        rows = [
            r for r in self._by_id.values()
            if (student is None or r.student == student)
            and (subject is None or r.subject == subject)
            and (start is None or r.date >= start)
            and (end is None or r.date < end)
        ]
        return sorted(rows, key=lambda r: (r.date, r.attendance_id), reverse=True)

    def all(self) -> list[AttendanceRecord]:
        return list(self._by_id.values())


def make_student_payload(**overrides) -> dict:
    payload = {
        "name": "An Nguyen",
        "email": "an@example.com",
        "password": "secret123",
        "contact": "0901234567",
        "address": "12 Le Loi",
        "admission_year": 2024,
    }
    payload.update(overrides)
    return payload
