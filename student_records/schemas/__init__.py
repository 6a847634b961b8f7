"""
Pydantic schemas package.
"""

from student_records.schemas.student import (
    ErrorResponse,
    MessageResponse,
    StudentPayload,
    StudentResponse,
    StudentStats,
)

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "StudentPayload",
    "StudentResponse",
    "StudentStats",
]
