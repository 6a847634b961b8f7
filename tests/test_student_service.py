import pytest

from student_records.core.exceptions import (
    InvalidRequestError,
    ResourceNotFoundError,
    StorageFailureError,
)
from student_records.schemas.student import StudentPayload
from student_records.services.student_service import (
    StudentService,
    parse_student_id,
)


def _payload(**overrides):
    data = {"name": "Alice", "email": "a@x.com", "course": "CS"}
    data.update(overrides)
    return StudentPayload(**data)


@pytest.fixture
def service(fake_repository):
    return StudentService(fake_repository, recent_limit=2)


class TestParseStudentId:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1", 1),
            (" 42 ", 42),
            ("007", 7),
            (5, 5),
            ("9223372036854775807", 2 ** 63 - 1),
            ("-9223372036854775808", -(2 ** 63)),
        ],
    )
    def test_accepts_integers(self, raw, expected):
        assert parse_student_id(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "abc", "", "12abc", "1.5", None, True,
            "9223372036854775808", "-9223372036854775809", 2 ** 63,
        ],
    )
    def test_rejects_malformed(self, raw):
        with pytest.raises(InvalidRequestError) as exc_info:
            parse_student_id(raw)
        assert exc_info.value.message == "Invalid ID"
        assert exc_info.value.status_code == 400


class TestCreate:
    def test_assigns_id_and_enrollment_date(self, service):
        created = service.create_student(_payload())

        assert created.id == 1
        assert created.enrollment_date is not None
        assert [s.id for s in service.list_students()] == [1]

    @pytest.mark.parametrize("field", ["name", "email", "course"])
    def test_missing_field_is_rejected_without_storing(self, service, fake_repository, field):
        with pytest.raises(InvalidRequestError) as exc_info:
            service.create_student(_payload(**{field: None}))

        assert exc_info.value.message == "Missing required fields"
        assert exc_info.value.details["missing_fields"] == [field]
        assert fake_repository.calls == []

    def test_blank_field_counts_as_missing(self, service):
        with pytest.raises(InvalidRequestError):
            service.create_student(_payload(course="   "))

    def test_storage_error_is_generic(self, failing_repository):
        service = StudentService(failing_repository)
        with pytest.raises(StorageFailureError) as exc_info:
            service.create_student(_payload())
        assert exc_info.value.message == "Failed to create student"
        assert exc_info.value.status_code == 500


class TestUpdate:
    def test_replaces_mutable_fields_only(self, service):
        created = service.create_student(_payload())

        updated = service.update_student(str(created.id), _payload(name="Alice B", course="Math"))

        assert updated.id == created.id
        assert updated.enrollment_date == created.enrollment_date
        assert (updated.name, updated.email, updated.course) == ("Alice B", "a@x.com", "Math")

    def test_invalid_id_checked_before_repository(self, service, fake_repository):
        with pytest.raises(InvalidRequestError):
            service.update_student("abc", _payload())
        assert fake_repository.calls == []

    def test_unknown_id_is_not_found(self, service):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            service.update_student("99", _payload())
        assert exc_info.value.message == "Student not found"
        assert exc_info.value.status_code == 404

    def test_missing_field_performs_no_mutation(self, service, fake_repository):
        created = service.create_student(_payload())
        fake_repository.calls.clear()

        with pytest.raises(InvalidRequestError):
            service.update_student(str(created.id), _payload(email=""))

        assert fake_repository.calls == []
        assert fake_repository.rows[created.id].email == "a@x.com"

    def test_storage_error_keeps_underlying_message(self, failing_repository):
        service = StudentService(failing_repository)
        with pytest.raises(StorageFailureError) as exc_info:
            service.update_student("1", _payload())
        assert exc_info.value.message == "database is locked"


class TestDelete:
    def test_delete_then_delete_again(self, service):
        created = service.create_student(_payload())

        result = service.delete_student(str(created.id))

        assert result.message == "Student deleted successfully"
        assert service.list_students() == []
        with pytest.raises(ResourceNotFoundError):
            service.delete_student(str(created.id))

    def test_invalid_id(self, service):
        with pytest.raises(InvalidRequestError):
            service.delete_student("one")

    def test_storage_error_keeps_underlying_message(self, failing_repository):
        service = StudentService(failing_repository)
        with pytest.raises(StorageFailureError) as exc_info:
            service.delete_student("1")
        assert exc_info.value.message == "database is locked"


class TestListAndStats:
    def test_search_is_trimmed_and_case_insensitive(self, service):
        service.create_student(_payload(name="Alice", course="Computer Science"))
        service.create_student(_payload(name="Bob", email="b@x.com", course="Psychology"))

        result = service.list_students(search="  psych ")

        assert [s.name for s in result] == ["Bob"]

    def test_list_storage_error_is_generic(self, failing_repository):
        service = StudentService(failing_repository)
        with pytest.raises(StorageFailureError) as exc_info:
            service.list_students()
        assert exc_info.value.message == "Failed to fetch students"

    def test_stats(self, service):
        service.create_student(_payload(name="A", course="CS"))
        service.create_student(_payload(name="B", course="CS"))
        service.create_student(_payload(name="C", course="Math"))

        stats = service.get_stats()

        assert stats.total_students == 3
        assert stats.course_distribution == {"CS": 2, "Math": 1}
        assert [s.name for s in stats.recent_enrollments] == ["C", "B"]

    def test_stats_storage_error(self, failing_repository):
        service = StudentService(failing_repository)
        with pytest.raises(StorageFailureError) as exc_info:
            service.get_stats()
        assert exc_info.value.message == "Failed to fetch student statistics"
