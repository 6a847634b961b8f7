"""
Data access layer.
"""

from student_records.repositories.base_repository import BaseRepository
from student_records.repositories.student_repository import StudentRepository

__all__ = ["BaseRepository", "StudentRepository"]
