# student_records/core/middleware.py
"""
Core middleware registration for the FastAPI application.

This module provides middleware components for request tracking and
timing. Each request gets an ID (taken from ``X-Request-ID`` when an
upstream proxy already set one) which is exposed to log records through
the ``request_id`` context variable.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from student_records.core.error_handlers import handle_unexpected_exception
from student_records.core.logging import get_logger, request_id as request_id_var

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each incoming request.

    The request ID is:
    - Stored in request.state.request_id
    - Bound to the logging context for the duration of the request
    - Added to response headers as X-Request-ID
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())

        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[self.header_name] = request_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that measures and logs request processing time.

    Adds X-Process-Time header to responses with the processing duration in seconds.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time=f"{process_time:.4f}s",
            client_host=request.client.host if request.client else None,
        )

        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Converts exceptions no handler claimed into the JSON 500 response.

    Runs inside CORSMiddleware, so these responses still carry CORS headers;
    the app-level ``Exception`` handler only fires in Starlette's outermost
    ServerErrorMiddleware.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return await handle_unexpected_exception(request, exc)


def register_middlewares(app: FastAPI) -> None:
    """
    Register core middlewares to the FastAPI application.

    Middlewares are registered in reverse order of execution (LIFO):
    ErrorHandlingMiddleware is innermost, RequestIDMiddleware runs first so
    the timing log line already carries the request ID. CORSMiddleware is
    added by the caller afterwards and wraps all of them.
    """
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    logger.debug(
        "Core middlewares registered",
        middlewares=["RequestIDMiddleware", "TimingMiddleware", "ErrorHandlingMiddleware"],
    )
