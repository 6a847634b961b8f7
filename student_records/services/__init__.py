"""
Service layer.
"""

from student_records.services.student_service import StudentService

__all__ = ["StudentService"]
