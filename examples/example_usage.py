"""Example: drive the service layer directly (no Flask).

Controllers stay thin; the business rules live in the services.
"""

import importlib
import sys

from config import get_settings_module

from src.school_management.school_management.container import build_container
from src.school_management.school_management.core.exceptions import DomainError


def main(student_pk: int = 1) -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    try:
        student, history = container.attendance_service.student_history(student_pk)
    except DomainError as e:
        print(f"error: {e}")
        return
    print(student.student_id, student.name)
    for entry in history:
        print(entry.to_dict())


if __name__ == "__main__":
    main(int(sys.argv[1]) if len(sys.argv) > 1 else 1)
