"""SQLAlchemy Base class for all models."""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Root SQLAlchemy base class."""
    pass


def import_models() -> None:
    """Import all models so they are registered with ``Base.metadata``."""
    from student_records.models import student  # noqa: F401
