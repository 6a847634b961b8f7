"""
Student endpoints.

All responses are JSON. Failures carry ``{"error": message}``; see
``core.error_handlers``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from student_records.api.deps import get_student_service
from student_records.schemas.student import (
    ErrorResponse,
    MessageResponse,
    StudentPayload,
    StudentResponse,
    StudentStats,
)
from student_records.services.student_service import StudentService

router = APIRouter(prefix="/students", tags=["Students"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid ID or missing field"},
    404: {"model": ErrorResponse, "description": "Student not found"},
    500: {"model": ErrorResponse, "description": "Storage failure"},
}


@router.get("", response_model=List[StudentResponse], responses={500: _ERRORS[500]})
def list_students(
    search: Optional[str] = Query(None, description="Case-insensitive match on name, email or course"),
    service: StudentService = Depends(get_student_service),
) -> List[StudentResponse]:
    """Return every stored student."""
    return service.list_students(search=search)


@router.post(
    "",
    response_model=StudentResponse,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
)
def create_student(
    payload: StudentPayload,
    service: StudentService = Depends(get_student_service),
) -> StudentResponse:
    """Create a student; ``id`` and ``enrollmentDate`` are assigned by the server."""
    return service.create_student(payload)


@router.get("/stats", response_model=StudentStats, responses={500: _ERRORS[500]})
def get_student_stats(
    service: StudentService = Depends(get_student_service),
) -> StudentStats:
    """Dashboard figures: total, per-course distribution and recent enrollments."""
    return service.get_stats()


# ``student_id`` is taken as a string so malformed ids surface as 400, not 422
@router.put("/{student_id}", response_model=StudentResponse, responses=_ERRORS)
def update_student(
    student_id: str,
    payload: StudentPayload,
    service: StudentService = Depends(get_student_service),
) -> StudentResponse:
    """Replace name, email and course of an existing student."""
    return service.update_student(student_id, payload)


@router.delete("/{student_id}", response_model=MessageResponse, responses=_ERRORS)
def delete_student(
    student_id: str,
    service: StudentService = Depends(get_student_service),
) -> MessageResponse:
    return service.delete_student(student_id)
