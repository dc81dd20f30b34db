from __future__ import annotations

import pytest

from src.school_management.school_management.container import wire_container

from fakes import InMemoryAttendance, InMemoryCounters, InMemoryStudents, InMemorySubjects


@pytest.fixture
def container():
    return wire_container(
        counters_repo=InMemoryCounters(),
        students_repo=InMemoryStudents(),
        subjects_repo=InMemorySubjects(),
        attendance_repo=InMemoryAttendance(),
    )


@pytest.fixture
def app(container, monkeypatch):
    from src.school_management.school_management.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    flask_app = create_app(container=container)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
