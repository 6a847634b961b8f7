"""
Student records service.

Validates input, calls the repository once per operation and translates
persistence errors into the application's exception taxonomy:

* ``InvalidRequestError`` (400) for malformed ids or missing fields,
  raised before the repository is touched.
* ``ResourceNotFoundError`` (404) when the repository reports
  ``RecordNotFoundError``.
* ``StorageFailureError`` (500) for every other ``StorageError``.
"""

import re
from typing import Any, Dict, List, Optional, Protocol, Sequence

from student_records.core.exceptions import (
    InvalidRequestError,
    RecordNotFoundError,
    ResourceNotFoundError,
    StorageError,
    StorageFailureError,
)
from student_records.core.logging import get_logger
from student_records.models.student import Student
from student_records.schemas.student import (
    MessageResponse,
    StudentPayload,
    StudentResponse,
    StudentStats,
)

logger = get_logger(__name__)

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")
# Range of a signed 64-bit INTEGER primary key
_ID_MIN, _ID_MAX = -(2 ** 63), 2 ** 63 - 1


class StudentStore(Protocol):
    """Persistence operations the service depends on."""

    def list(self, search: Optional[str] = None) -> Sequence[Student]: ...

    def create(self, obj_in: Dict[str, Any]) -> Student: ...

    def update(self, id_: Any, obj_in: Dict[str, Any]) -> Student: ...

    def delete(self, id_: Any) -> None: ...

    def count(self) -> int: ...

    def course_distribution(self) -> Dict[str, int]: ...

    def recent(self, limit: int) -> Sequence[Student]: ...


def parse_student_id(raw_id: Any) -> int:
    """
    Parse a path identifier.

    Raises:
        InvalidRequestError: unless ``raw_id`` is an integer or a string of
            decimal digits with an optional sign, within the
            64-bit range of the primary key column.
    """
    value = None
    if isinstance(raw_id, int) and not isinstance(raw_id, bool):
        value = raw_id
    elif isinstance(raw_id, str) and _ID_PATTERN.fullmatch(raw_id.strip()):
        value = int(raw_id.strip())
    if value is not None and _ID_MIN <= value <= _ID_MAX:
        return value
    raise InvalidRequestError("Invalid ID", details={"id": str(raw_id)})


def validate_payload(payload: StudentPayload) -> Dict[str, str]:
    """Return the writable fields, or raise if any is missing or blank."""
    missing = payload.missing_fields()
    if missing:
        raise InvalidRequestError(
            "Missing required fields",
            details={"missing_fields": missing},
        )
    return {"name": payload.name, "email": payload.email, "course": payload.course}


class StudentService:
    """Create, read, update and delete students."""

    def __init__(self, repository: StudentStore, recent_limit: int = 5):
        self.repository = repository
        self.recent_limit = recent_limit

    def list_students(self, search: Optional[str] = None) -> List[StudentResponse]:
        term = search.strip() if search else None
        try:
            students = self.repository.list(search=term or None)
        except StorageError as e:
            logger.error("Error fetching students", error=e.message)
            raise StorageFailureError("Failed to fetch students", operation="list") from e
        return [StudentResponse.model_validate(s) for s in students]

    def create_student(self, payload: StudentPayload) -> StudentResponse:
        data = validate_payload(payload)
        try:
            student = self.repository.create(data)
        except StorageError as e:
            logger.error("Error creating student", error=e.message)
            raise StorageFailureError("Failed to create student", operation="create") from e

        logger.info("Student created", student_id=student.id, course=student.course)
        return StudentResponse.model_validate(student)

    def update_student(self, raw_id: Any, payload: StudentPayload) -> StudentResponse:
        student_id = parse_student_id(raw_id)
        data = validate_payload(payload)
        try:
            student = self.repository.update(student_id, data)
        except RecordNotFoundError as e:
            raise ResourceNotFoundError("Student", student_id, "Student not found") from e
        except StorageError as e:
            logger.error("Error updating student", student_id=student_id, error=e.message)
            raise StorageFailureError(e.message, operation="update") from e

        logger.info("Student updated", student_id=student_id)
        return StudentResponse.model_validate(student)

    def delete_student(self, raw_id: Any) -> MessageResponse:
        student_id = parse_student_id(raw_id)
        try:
            self.repository.delete(student_id)
        except RecordNotFoundError as e:
            raise ResourceNotFoundError("Student", student_id, "Student not found") from e
        except StorageError as e:
            logger.error("Error deleting student", student_id=student_id, error=e.message)
            raise StorageFailureError(e.message, operation="delete") from e

        logger.info("Student deleted", student_id=student_id)
        return MessageResponse(message="Student deleted successfully")

    def get_stats(self) -> StudentStats:
        """Totals, per-course counts and the latest enrollments for the dashboard."""
        try:
            total = self.repository.count()
            distribution = self.repository.course_distribution()
            recent = self.repository.recent(self.recent_limit)
        except StorageError as e:
            logger.error("Error fetching student statistics", error=e.message)
            raise StorageFailureError(
                "Failed to fetch student statistics", operation="stats"
            ) from e

        return StudentStats(
            total_students=total,
            course_distribution=distribution,
            recent_enrollments=[StudentResponse.model_validate(s) for s in recent],
        )
