"""
Custom Exceptions for the Student Records Service

Two families live here:

* ``BaseAppException`` subclasses are raised by the service layer and map
  directly onto HTTP responses (``status_code`` and an ``{"error": ...}``
  body).
* ``RepositoryError`` subclasses are raised by the persistence layer and
  never reach the HTTP boundary; the service layer translates them.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    DATABASE_ERROR = "DATABASE_ERROR"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Response body sent to clients"""
        return {"error": self.message}

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class InvalidRequestError(BaseAppException):
    """Malformed identifier or missing required field"""

    def __init__(
        self,
        message: str = "Invalid request",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.INVALID_REQUEST, details, 400)


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[Any] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details, 404)


class StorageFailureError(BaseAppException):
    """Any persistence failure other than a missing record"""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
    ):
        details = {"operation": operation} if operation else {}
        super().__init__(message, ErrorCode.DATABASE_ERROR, details, 500)


# ========================================
# Persistence Layer Exceptions
# ========================================

class RepositoryError(Exception):
    """Base class for errors raised by repositories"""


class RecordNotFoundError(RepositoryError):
    """The record targeted by an update or delete does not exist"""

    def __init__(self, model_name: str, record_id: Any):
        self.model_name = model_name
        self.record_id = record_id
        super().__init__(f"{model_name} with id {record_id} not found")


class StorageError(RepositoryError):
    """Wraps a database driver or ORM failure"""

    def __init__(self, message: str, operation: Optional[str] = None):
        self.message = message
        self.operation = operation
        super().__init__(message)


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "InvalidRequestError",
    "ResourceNotFoundError",
    "StorageFailureError",
    "RepositoryError",
    "RecordNotFoundError",
    "StorageError",
]
