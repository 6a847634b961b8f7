"""Database initialization utilities."""
from typing import Optional

from sqlalchemy.engine import Engine

from student_records.core.logging import get_logger
from student_records.db.base import Base, import_models

logger = get_logger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create any missing tables.

    Note: This is suitable for development/testing only.
    For production, manage the schema with migrations instead.
    """
    if bind is None:
        from student_records.db.session import engine as bind

    import_models()
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables ensured", tables=sorted(Base.metadata.tables))


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data! Use with caution.
    """
    if bind is None:
        from student_records.db.session import engine as bind

    import_models()
    Base.metadata.drop_all(bind=bind)
    logger.warning("All database tables dropped")
