"""
Base repository with standardized CRUD operations and error handling.

Repositories own the session's transaction for each write: they commit on
success, roll back on failure, and re-raise driver/ORM errors as
``StorageError``. A missing target on update/delete is reported with the
typed ``RecordNotFoundError`` rather than an ORM-specific code.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterable, Iterator, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from student_records.core.exceptions import RecordNotFoundError, StorageError
from student_records.core.logging import get_logger
from student_records.db.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository with common CRUD helpers.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Transaction Management ====================

    @contextmanager
    def transaction(self, operation: str) -> Iterator[Session]:
        """
        Commit on success, roll back and raise ``StorageError`` on database errors.

        ``RecordNotFoundError`` raised inside the block rolls back and
        propagates unchanged.
        """
        try:
            yield self.db
            self.db.commit()
        except RecordNotFoundError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Transaction rolled back", operation=operation, exc_info=True)
            raise StorageError(str(e), operation=operation) from e

    @contextmanager
    def reading(self, operation: str) -> Iterator[Session]:
        """Wrap read-only queries so driver errors surface as ``StorageError``."""
        try:
            yield self.db
        except SQLAlchemyError as e:
            logger.error("Query failed", operation=operation, exc_info=True)
            raise StorageError(str(e), operation=operation) from e

    # ==================== Read Operations ====================

    def get_multi(
        self,
        *,
        limit: Optional[int] = None,
        order_by: Optional[Iterable[Any]] = None,
    ) -> Sequence[ModelType]:
        stmt = select(self.model)
        if order_by is not None:
            stmt = stmt.order_by(*order_by)
        if limit:
            stmt = stmt.limit(limit)

        with self.reading(f"list {self.model.__name__}"):
            return self.db.execute(stmt).scalars().all()

    def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        with self.reading(f"count {self.model.__name__}"):
            return self.db.execute(stmt).scalar_one()

    # ==================== Write Operations ====================

    def create(self, obj_in: Dict[str, Any]) -> ModelType:
        db_obj = self.model(**obj_in)
        with self.transaction(f"create {self.model.__name__}"):
            self.db.add(db_obj)
        with self.reading(f"refresh {self.model.__name__}"):
            self.db.refresh(db_obj)
        return db_obj

    def update(self, id_: Any, obj_in: Dict[str, Any]) -> ModelType:
        with self.transaction(f"update {self.model.__name__}"):
            db_obj = self.db.get(self.model, id_)
            if db_obj is None:
                raise RecordNotFoundError(self.model.__name__, id_)
            for field, value in obj_in.items():
                setattr(db_obj, field, value)
        with self.reading(f"refresh {self.model.__name__}"):
            self.db.refresh(db_obj)
        return db_obj

    def delete(self, id_: Any) -> None:
        with self.transaction(f"delete {self.model.__name__}"):
            db_obj = self.db.get(self.model, id_)
            if db_obj is None:
                raise RecordNotFoundError(self.model.__name__, id_)
            self.db.delete(db_obj)
