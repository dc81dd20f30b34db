from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.constants import DEFAULT_STUDENT_ROLE


@dataclass(frozen=True)
class Student:
    """Domain entity: a student profile.

    ``attendance`` holds back-references (attendance ids) in insertion order;
    the student does not own those records.
    """

    id: int
    student_id: str
    name: str
    email: str
    password_hash: str
    contact: str
    address: str
    admission_year: int
    parents_contact: tuple[str, ...] = ()
    current_std: str = ""
    role: str = DEFAULT_STUDENT_ROLE
    is_verified: bool = False
    is_admitted: bool = False
    profile_image: str = ""
    subjects: tuple[int, ...] = ()
    batches: tuple[int, ...] = ()
    attendance: tuple[int, ...] = ()
    scores: tuple[int, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        """Wire shape. The password hash never leaves the service."""
        return {
            "id": self.id,
            "studentId": self.student_id,
            "name": self.name,
            "email": self.email,
            "contact": self.contact,
            "parentsContact": list(self.parents_contact),
            "address": self.address,
            "currentStd": self.current_std,
            "role": self.role,
            "isVerified": self.is_verified,
            "isAdmitted": self.is_admitted,
            "profileImage": self.profile_image,
            "subjects": list(self.subjects),
            "batches": list(self.batches),
            "attendance": list(self.attendance),
            "scores": list(self.scores),
            "admissionYear": self.admission_year,
            "createdAt": isoformat_or_none(self.created_at),
            "updatedAt": isoformat_or_none(self.updated_at),
        }
