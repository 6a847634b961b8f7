import pytest

from student_records.core.exceptions import RecordNotFoundError, StorageError
from student_records.db.init_db import drop_db
from student_records.repositories.student_repository import StudentRepository


@pytest.fixture
def repository(db_session):
    return StudentRepository(db_session)


def _add(repository, name, course="CS", email=None):
    return repository.create({"name": name, "email": email or f"{name.lower()}@x.com", "course": course})


def test_create_populates_id_and_enrollment_date(repository):
    student = _add(repository, "Alice")

    assert student.id == 1
    assert student.enrollment_date is not None
    assert [s.id for s in repository.list()] == [1]


def test_update_changes_fields_and_keeps_enrollment_date(repository):
    student = _add(repository, "Alice")
    enrolled = student.enrollment_date

    updated = repository.update(student.id, {"name": "Alice B", "email": "ab@x.com", "course": "Math"})

    assert updated.id == student.id
    assert updated.enrollment_date == enrolled
    assert (updated.name, updated.email, updated.course) == ("Alice B", "ab@x.com", "Math")


def test_update_missing_record(repository):
    with pytest.raises(RecordNotFoundError) as exc_info:
        repository.update(42, {"name": "x"})
    assert exc_info.value.record_id == 42


def test_delete(repository):
    student = _add(repository, "Alice")

    repository.delete(student.id)

    assert repository.list() == []
    with pytest.raises(RecordNotFoundError):
        repository.delete(student.id)


def test_search_matches_any_text_column(repository):
    _add(repository, "Alice", course="Computer Science")
    _add(repository, "Bob", course="Psychology", email="bob@uni.edu")

    assert [s.name for s in repository.list(search="uni.edu")] == ["Bob"]
    assert [s.name for s in repository.list(search="computer")] == ["Alice"]
    assert repository.list(search="100%") == []


def test_aggregates(repository):
    _add(repository, "A", course="CS")
    _add(repository, "B", course="CS")
    _add(repository, "C", course="Math")

    assert repository.count() == 3
    assert repository.course_distribution() == {"CS": 2, "Math": 1}
    assert [s.name for s in repository.recent(2)] == ["C", "B"]


def test_integrity_failure_is_wrapped_and_rolled_back(repository):
    with pytest.raises(StorageError) as exc_info:
        repository.create({"name": None, "email": "a@x.com", "course": "CS"})
    assert exc_info.value.operation == "create Student"

    # Session is usable again after the rollback
    assert _add(repository, "Alice").id is not None


def test_missing_table_is_wrapped(repository, engine):
    drop_db(engine)

    with pytest.raises(StorageError):
        repository.list()
