from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta

import pytest

from src.school_management.school_management.attendance.service import AttendanceService
from src.school_management.school_management.core.enums import AttendanceStatus
from src.school_management.school_management.core.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.school_management.school_management.counters.service import SequenceService
from src.school_management.school_management.students.service import StudentService

from fakes import (
    FIXED_NOW,
    InMemoryAttendance,
    InMemoryCounters,
    InMemoryStudents,
    InMemorySubjects,
    make_student_payload,
)


class Env:
    def __init__(self):
        self.students = InMemoryStudents()
        self.subjects = InMemorySubjects()
        self.attendance = InMemoryAttendance()
        self.student_service = StudentService(self.students, SequenceService(InMemoryCounters()))
        self.svc = AttendanceService(self.attendance, self.students, self.subjects, clock=lambda: FIXED_NOW)

        self.math = self.subjects.create(name="Mathematics")
        self.physics = self.subjects.create(name="Physics")
        self.student = self.student_service.create_student(**make_student_payload())


@pytest.fixture
def env():
    return Env()


def test_mark_attendance_creates_record_and_appends_reference(env):
    result = env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Present")

    assert result.attendance.status == AttendanceStatus.PRESENT
    assert result.attendance.note == ""
    assert result.attendance.date == FIXED_NOW
    assert result.student.attendance == (result.attendance.attendance_id,)
    assert len(env.attendance.all()) == 1


def test_second_mark_same_day_is_conflict_and_creates_nothing(env):
    env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Present")
    later_today = FIXED_NOW.replace(hour=18)

    with pytest.raises(ConflictError):
        env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Late", now=later_today)

    assert len(env.attendance.all()) == 1
    assert len(env.students.get_by_id(env.student.id).attendance) == 1


def test_other_subject_and_next_day_are_allowed(env):
    env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Present")
    env.svc.mark_attendance(student=env.student.id, subject=env.physics.subject_id, status="Absent")
    env.svc.mark_attendance(
        student=env.student.id,
        subject=env.math.subject_id,
        status="Late",
        now=FIXED_NOW + timedelta(days=1),
    )

    assert len(env.students.get_by_id(env.student.id).attendance) == 3


def test_day_boundary_is_midnight(env):
    just_before = datetime(2024, 3, 14, 23, 59, 59)
    just_after = datetime(2024, 3, 15, 0, 0, 0)

    env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Present", now=just_before)
    env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Present", now=just_after)

    buckets = sorted(r.date.date() for r in env.attendance.all())
    assert buckets == [date(2024, 3, 14), date(2024, 3, 15)]


def test_existing_entries_keep_their_order(env):
    ids = []
    for offset in range(3):
        result = env.svc.mark_attendance(
            student=env.student.id,
            subject=env.math.subject_id,
            status="Present",
            now=FIXED_NOW + timedelta(days=offset),
        )
        ids.append(result.attendance.attendance_id)
        assert list(result.student.attendance) == ids


@pytest.mark.parametrize(
    "payload",
    [
        {"subject": 1, "status": "Present"},
        {"student": 1, "status": "Present"},
        {"student": 1, "subject": 1},
        {"student": 1, "subject": 1, "status": ""},
    ],
)
def test_missing_mandatory_input_is_bad_request_without_side_effects(env, payload):
    args = {"student": None, "subject": None, "status": None}
    args.update(payload)

    with pytest.raises(BadRequestError):
        env.svc.mark_attendance(**args)

    assert env.attendance.all() == []
    assert env.students.get_by_id(env.student.id).attendance == ()


def test_unknown_status_fails_validation(env):
    with pytest.raises(ValidationError):
        env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Excused")
    assert env.attendance.all() == []


def test_non_integer_reference_fails_validation(env):
    with pytest.raises(ValidationError):
        env.svc.mark_attendance(student="abc", subject=env.math.subject_id, status="Present")


def test_missing_student_rolls_back_the_new_record(env):
    with pytest.raises(NotFoundError):
        env.svc.mark_attendance(student=999, subject=env.math.subject_id, status="Present")

    assert env.attendance.all() == []
    assert env.attendance.deleted == [1]


def test_missing_student_does_not_block_a_later_retry(env):
    with pytest.raises(NotFoundError):
        env.svc.mark_attendance(student=999, subject=env.math.subject_id, status="Present")

    # The compensated record must not hold the day bucket.
    env.students._by_id[999] = replace(env.student, id=999, email="x@example.com")
    result = env.svc.mark_attendance(student=999, subject=env.math.subject_id, status="Present")
    assert result.student.attendance == (result.attendance.attendance_id,)


def test_store_unique_key_wins_a_race_past_the_check(env):
    env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Present")
    # Simulate a concurrent request whose duplicate check ran before the first insert.
    env.attendance.find_since = lambda **_: None

    with pytest.raises(ConflictError):
        env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Present")

    assert len(env.attendance.all()) == 1
    assert len(env.students.get_by_id(env.student.id).attendance) == 1


def test_history_is_expanded_with_subject_names(env):
    env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Present", note="on time")
    result = env.svc.mark_attendance(student=env.student.id, subject=env.physics.subject_id, status="Late")

    history = [h.to_dict() for h in result.history]
    assert [h["subject"]["name"] for h in history] == ["Mathematics", "Physics"]
    assert [h["status"] for h in history] == ["Present", "Late"]
    assert result.student_dict()["attendance"] == history


def test_history_skips_references_to_deleted_records(env):
    first = env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Present")
    env.svc.mark_attendance(student=env.student.id, subject=env.physics.subject_id, status="Present")
    env.attendance.delete_by_id(first.attendance.attendance_id)

    student, history = env.svc.student_history(env.student.id)

    assert len(student.attendance) == 2
    assert [h.subject_name for h in history] == ["Physics"]


def test_student_history_for_unknown_student(env):
    with pytest.raises(NotFoundError):
        env.svc.student_history(12345)


def test_search_filters_by_day_and_subject(env):
    env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Present")
    env.svc.mark_attendance(student=env.student.id, subject=env.physics.subject_id, status="Absent")
    env.svc.mark_attendance(
        student=env.student.id,
        subject=env.math.subject_id,
        status="Late",
        now=FIXED_NOW + timedelta(days=1),
    )

    assert len(env.svc.search(student=env.student.id)) == 3
    assert len(env.svc.search(day=FIXED_NOW.date())) == 2
    only_math_today = env.svc.search(subject=str(env.math.subject_id), day=FIXED_NOW.date())
    assert [r.status for r in only_math_today] == [AttendanceStatus.PRESENT]


def test_failed_append_removes_the_new_record_and_allows_retry(env, monkeypatch):
    def lost_connection(*args, **kwargs):
        raise RuntimeError("Lost connection to MySQL server during query")

    monkeypatch.setattr(env.students, "append_attendance", lost_connection)
    with pytest.raises(RuntimeError):
        env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Present")

    assert env.attendance.all() == []

    monkeypatch.undo()
    result = env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Present")
    assert result.student.attendance == (result.attendance.attendance_id,)


def test_last_instant_of_the_day_stays_in_that_day(env):
    last_instant = datetime(2024, 3, 14, 23, 59, 59, 999999)

    first = env.svc.mark_attendance(
        student=env.student.id, subject=env.math.subject_id, status="Present", now=last_instant
    )
    assert first.attendance.date == datetime(2024, 3, 14, 23, 59, 59)

    next_day = env.svc.mark_attendance(
        student=env.student.id, subject=env.math.subject_id, status="Present", now=datetime(2024, 3, 15, 8, 0)
    )
    assert next_day.attendance.date.date() == date(2024, 3, 15)


@pytest.mark.parametrize("student", [1.9, 0.5, float("nan")])
def test_fractional_reference_fails_validation(env, student):
    with pytest.raises(ValidationError):
        env.svc.mark_attendance(student=student, subject=env.math.subject_id, status="Present")
    assert env.attendance.all() == []


def test_integral_float_reference_is_accepted(env):
    result = env.svc.mark_attendance(student=float(env.student.id), subject=env.math.subject_id, status="Present")
    assert result.attendance.student == env.student.id


@pytest.mark.parametrize("note", [5, ["late"], {"text": "x"}])
def test_non_string_note_fails_validation(env, note):
    with pytest.raises(ValidationError):
        env.svc.mark_attendance(student=env.student.id, subject=env.math.subject_id, status="Late", note=note)
    assert env.attendance.all() == []


def test_unknown_subject_is_not_found_without_side_effects(env):
    with pytest.raises(NotFoundError):
        env.svc.mark_attendance(student=env.student.id, subject=404, status="Present")

    assert env.attendance.all() == []
    assert env.students.get_by_id(env.student.id).attendance == ()
