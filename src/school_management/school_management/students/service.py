from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.validators import (
    missing_fields,
    optional_text,
    require_email,
    require_id,
    require_id_list,
    require_int_between,
    require_min_length,
    require_non_empty,
    require_str_list,
)
from ..core.constants import MAX_ADMISSION_YEAR, MIN_ADMISSION_YEAR, MIN_PASSWORD_LENGTH
from ..core.exceptions import BadRequestError, NotFoundError, ValidationError
from ..counters.service import SequenceService
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)

_REQUIRED_ON_CREATE = ("name", "email", "password", "contact", "address", "admission_year")


class StudentService:
    """Use case: register students and edit their profile."""

    def __init__(self, students: StudentRepository, sequences: SequenceService):
        self._students = students
        self._sequences = sequences

    def get_student(self, student_pk: Any) -> Student:
        student = self._students.get_by_id(require_id(student_pk, "student"))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def create_student(
        self,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        contact: Optional[str] = None,
        address: Optional[str] = None,
        admission_year: Any = None,
        parents_contact: Sequence[str] = (),
        current_std: Optional[str] = None,
        subjects: Sequence[Any] = (),
        batches: Sequence[Any] = (),
    ) -> Student:
        payload = {
            "name": name,
            "email": email,
            "password": password,
            "contact": contact,
            "address": address,
            "admission_year": admission_year,
        }
        missing = missing_fields(payload, _REQUIRED_ON_CREATE)
        if missing:
            raise BadRequestError(f"Missing required fields: {', '.join(missing)}")

        email = require_email(email)
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)
        year = require_int_between(admission_year, "admissionYear", MIN_ADMISSION_YEAR, MAX_ADMISSION_YEAR)

        if self._students.get_by_email(email):
            raise ValidationError("Email already in use")

        fields = {
            "name": require_non_empty(name, "name"),
            "email": email,
            "contact": require_non_empty(contact, "contact"),
            "address": require_non_empty(address, "address"),
            "admission_year": year,
            "parents_contact": require_str_list(parents_contact or [], "parentsContact"),
            "current_std": optional_text(current_std, "currentStd"),
            "subjects": require_id_list(subjects or [], "subjects"),
            "batches": require_id_list(batches or [], "batches"),
        }

        # The id is minted only once all checks pass; a failed insert leaves a gap, never a duplicate.
        student_id = self._sequences.next_student_id(year)
        student = self._students.create(
            student_id=student_id,
            password_hash=generate_password_hash(password),
            **fields,
        )
        logger.info("Created student %s (pk=%s)", student.student_id, student.id)
        return student

    def update_student_details(
        self,
        student_pk: Any,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        contact: Optional[str] = None,
        address: Optional[str] = None,
        batches: Optional[Sequence[Any]] = None,
    ) -> Student:
        """Partial update: a field is written only when its value is truthy.

        A falsy value (``""``, ``[]``, ``None``) means "leave as stored"; there is
        no way to clear a field through this call.
        """
        current = self.get_student(student_pk)

        fields: dict[str, Any] = {}
        if name:
            fields["name"] = require_non_empty(name, "name")
        if contact:
            fields["contact"] = require_non_empty(contact, "contact")
        if email:
            fields["email"] = require_email(email)
        if batches:
            fields["batches"] = require_id_list(batches, "batches")
        if address:
            fields["address"] = require_non_empty(address, "address")

        new_email = fields.get("email")
        if new_email and new_email != current.email:
            other = self._students.get_by_email(new_email)
            if other and other.id != current.id:
                raise ValidationError("Email already in use")

        if fields and not self._students.update_fields(current.id, fields):
            raise NotFoundError("Student not found")

        updated = self._students.get_by_id(current.id)
        if not updated:
            raise NotFoundError("Student not found")
        logger.info("Updated student %s fields=%s", updated.student_id, sorted(fields))
        return updated
