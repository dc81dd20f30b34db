from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import make_clock
from .counters.mysql_counter_repository import MySQLCounterRepository
from .counters.repository import CounterRepository
from .counters.service import SequenceService
from .database.connection import DBConfig, DatabaseConnection
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.repository import SubjectRepository
from .subjects.service import SubjectService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    counters_repo: CounterRepository
    students_repo: StudentRepository
    subjects_repo: SubjectRepository
    attendance_repo: AttendanceRepository

    sequence_service: SequenceService
    student_service: StudentService
    subject_service: SubjectService
    attendance_service: AttendanceService


def wire_container(
    *,
    counters_repo: CounterRepository,
    students_repo: StudentRepository,
    subjects_repo: SubjectRepository,
    attendance_repo: AttendanceRepository,
    conn: Optional[DatabaseConnection] = None,
    day_boundary_tz: str = "local",
) -> Container:
    sequence_service = SequenceService(counters_repo)
    student_service = StudentService(students_repo, sequence_service)
    subject_service = SubjectService(subjects_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        students_repo,
        subjects_repo,
        clock=make_clock(day_boundary_tz),
    )

    return Container(
        conn=conn,
        counters_repo=counters_repo,
        students_repo=students_repo,
        subjects_repo=subjects_repo,
        attendance_repo=attendance_repo,
        sequence_service=sequence_service,
        student_service=student_service,
        subject_service=subject_service,
        attendance_service=attendance_service,
    )


def build_container(*, db_config: Mapping[str, Any], day_boundary_tz: str = "local") -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return wire_container(
        conn=conn,
        counters_repo=MySQLCounterRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        day_boundary_tz=day_boundary_tz,
    )
