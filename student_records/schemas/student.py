"""
Student schemas.

Request bodies accept ``name``, ``email`` and ``course``; responses use
camelCase keys on the wire (``enrollmentDate``) to match the front-end.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "REQUIRED_FIELDS",
    "StudentPayload",
    "StudentResponse",
    "StudentStats",
    "MessageResponse",
    "ErrorResponse",
]

REQUIRED_FIELDS = ("name", "email", "course")


class StudentPayload(BaseModel):
    """
    Body of create and update requests.

    Fields are optional at the schema level so that presence is checked by
    the service, which reports missing values as a 400 rather than a
    schema error.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    course: Optional[str] = None

    def missing_fields(self) -> List[str]:
        """Names of required fields that are absent or blank"""
        return [field for field in REQUIRED_FIELDS if not getattr(self, field)]


class StudentResponse(BaseModel):
    """A stored student as returned by the API."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: int
    name: str
    email: str
    course: str
    enrollment_date: datetime


class StudentStats(BaseModel):
    """Figures shown on the dashboard."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    total_students: int = Field(..., ge=0)
    course_distribution: Dict[str, int] = Field(default_factory=dict)
    recent_enrollments: List[StudentResponse] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
