from __future__ import annotations

import logging

from ..common.validators import require_non_empty
from ..core.exceptions import BadRequestError, ValidationError
from .model import Subject
from .repository import SubjectRepository

logger = logging.getLogger(__name__)


class SubjectService:
    def __init__(self, subjects: SubjectRepository):
        self._subjects = subjects

    def create_subject(self, *, name: str | None) -> Subject:
        if not name:
            raise BadRequestError("name is required.")
        name = require_non_empty(name, "name")
        if self._subjects.get_by_name(name):
            raise ValidationError("Subject name already exists")

        subject = self._subjects.create(name=name)
        logger.info("Created subject %s (%s)", subject.subject_id, subject.name)
        return subject

    def list_subjects(self):
        return list(self._subjects.list_all())
