"""
Database models package.
"""

from student_records.models.student import Student

__all__ = ["Student"]
