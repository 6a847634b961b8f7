"""
FastAPI dependencies.

The database session is request-scoped; the repository and service are
built from it per request. Tests swap the session (or the service) via
``app.dependency_overrides``.

Example usage in a router:
    @router.get("/students")
    def list_students(service: StudentService = Depends(deps.get_student_service)):
        ...
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from student_records.config.settings import settings
from student_records.db.session import get_db
from student_records.repositories.student_repository import StudentRepository
from student_records.services.student_service import StudentService


def get_student_repository(db: Session = Depends(get_db)) -> StudentRepository:
    return StudentRepository(db)


def get_student_service(
    repository: StudentRepository = Depends(get_student_repository),
) -> StudentService:
    return StudentService(repository, recent_limit=settings.RECENT_ENROLLMENTS_LIMIT)


__all__ = [
    "get_db",
    "get_student_repository",
    "get_student_service",
]
