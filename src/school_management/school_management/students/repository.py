from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, student_pk: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Student]:
        raise NotImplementedError

    def create(
        self,
        *,
        student_id: str,
        name: str,
        email: str,
        password_hash: str,
        contact: str,
        address: str,
        admission_year: int,
        parents_contact: Sequence[str] = (),
        current_std: str = "",
        subjects: Sequence[int] = (),
        batches: Sequence[int] = (),
    ) -> Student:
        """Raises ValidationError when email or student_id is already taken."""

        raise NotImplementedError

    def update_fields(self, student_pk: int, fields: Mapping[str, Any]) -> bool:
        """Set only the given profile fields. False when the student is missing."""

        raise NotImplementedError

    def append_attendance(self, student_pk: int, attendance_id: int) -> bool:
        """Append one id to the attendance list in place, never replacing it.

        False when no student matched.
        """

        raise NotImplementedError
