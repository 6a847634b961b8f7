"""
Student repository.

Persistence operations for the ``student`` table, including the
aggregate queries used by the dashboard.
"""

from typing import Dict, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from student_records.models.student import Student
from student_records.repositories.base_repository import BaseRepository


class StudentRepository(BaseRepository[Student]):
    """Repository for ``Student`` records."""

    def __init__(self, db: Session):
        super().__init__(Student, db)

    def list(self, search: Optional[str] = None) -> Sequence[Student]:
        """
        All students ordered by id, optionally filtered.

        ``search`` matches name, email or course case-insensitively as a
        substring.
        """
        stmt = select(Student).order_by(Student.id)
        if search:
            term = search.lower()
            stmt = stmt.where(
                or_(
                    func.lower(Student.name).contains(term, autoescape=True),
                    func.lower(Student.email).contains(term, autoescape=True),
                    func.lower(Student.course).contains(term, autoescape=True),
                )
            )

        with self.reading("list Student"):
            return self.db.execute(stmt).scalars().all()

    def course_distribution(self) -> Dict[str, int]:
        """Number of students per course."""
        stmt = (
            select(Student.course, func.count(Student.id))
            .group_by(Student.course)
            .order_by(Student.course)
        )
        with self.reading("course distribution"):
            return {course: count for course, count in self.db.execute(stmt).all()}

    def recent(self, limit: int) -> Sequence[Student]:
        """Most recently enrolled students first."""
        return self.get_multi(
            limit=limit,
            order_by=(Student.enrollment_date.desc(), Student.id.desc()),
        )
