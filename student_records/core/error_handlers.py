"""
Exception handlers translating application errors into JSON responses.

Every failure leaves the API as ``{"error": message}`` with the status
code carried by the exception.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from student_records.core.exceptions import BaseAppException
from student_records.core.logging import get_logger

logger = get_logger(__name__)


async def _handle_application_exception(request: Request, exception: BaseAppException) -> JSONResponse:
    """Handle custom application exceptions"""
    log = logger.error if exception.status_code >= 500 else logger.warning
    log(
        "Application exception",
        error_code=exception.error_code.value,
        error_message=exception.message,
        details=exception.details,
        path=request.url.path,
        method=request.method,
    )
    return JSONResponse(status_code=exception.status_code, content=exception.to_dict())


async def _handle_validation_error(request: Request, exception: RequestValidationError) -> JSONResponse:
    """Bodies that cannot be parsed into the expected shape"""
    logger.warning(
        "Request validation failed",
        error_count=len(exception.errors()),
        path=request.url.path,
        method=request.method,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body"},
    )


async def handle_unexpected_exception(request: Request, exception: Exception) -> JSONResponse:
    """Handle unexpected exceptions"""
    logger.error(
        "Unhandled exception",
        error_type=type(exception).__name__,
        path=request.url.path,
        method=request.method,
        exc_info=exception,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An unknown error occurred"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAppException, _handle_application_exception)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_exception)
