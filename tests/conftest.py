import os

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from student_records.config.settings import settings
from student_records.core.exceptions import RecordNotFoundError, StorageError
from student_records.db.init_db import drop_db, init_db
from student_records.db.session import get_db
from student_records.main import create_app
from student_records.models.student import Student

API = settings.API_PREFIX


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def app(session_factory):
    app = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


class FakeStudentRepository:
    """In-memory stand-in for ``StudentRepository``."""

    def __init__(self, fail_with: Optional[str] = None):
        self.rows: Dict[int, Student] = {}
        self.fail_with = fail_with
        self.calls: List[str] = []
        self._next_id = 1
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with:
            raise StorageError(self.fail_with, operation=operation)

    def list(self, search: Optional[str] = None) -> List[Student]:
        self._record("list")
        rows = [self.rows[key] for key in sorted(self.rows)]
        if search:
            term = search.lower()
            rows = [
                s for s in rows
                if term in s.name.lower() or term in s.email.lower() or term in s.course.lower()
            ]
        return rows

    def create(self, obj_in):
        self._record("create")
        self._clock += timedelta(days=1)
        student = Student(id=self._next_id, enrollment_date=self._clock, **obj_in)
        self.rows[student.id] = student
        self._next_id += 1
        return student

    def update(self, id_, obj_in):
        self._record("update")
        if id_ not in self.rows:
            raise RecordNotFoundError("Student", id_)
        student = self.rows[id_]
        for field, value in obj_in.items():
            setattr(student, field, value)
        return student

    def delete(self, id_) -> None:
        self._record("delete")
        if id_ not in self.rows:
            raise RecordNotFoundError("Student", id_)
        del self.rows[id_]

    def count(self) -> int:
        self._record("count")
        return len(self.rows)

    def course_distribution(self) -> Dict[str, int]:
        self._record("course_distribution")
        counts: Dict[str, int] = {}
        for student in self.rows.values():
            counts[student.course] = counts.get(student.course, 0) + 1
        return counts

    def recent(self, limit: int) -> List[Student]:
        self._record("recent")
        rows = sorted(self.rows.values(), key=lambda s: s.enrollment_date, reverse=True)
        return rows[:limit]


@pytest.fixture
def fake_repository():
    return FakeStudentRepository()


@pytest.fixture
def failing_repository():
    return FakeStudentRepository(fail_with="database is locked")
