from __future__ import annotations

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from student_records.api.router import router as api_router
from student_records.config.settings import settings
from student_records.core.error_handlers import register_exception_handlers
from student_records.core.logging import get_logger, setup_logging
from student_records.core.middleware import register_middlewares
from student_records.db.init_db import init_db

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version and debug mode from Settings.
    - Registers CORS, core middleware, and exception handlers.
    - Includes the API router under ``API_PREFIX``.
    """
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    register_middlewares(app)

    # Outermost, so error responses from the inner middlewares get CORS headers too
    cors_origins = settings.get_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        # Credentials cannot be combined with a wildcard origin
        allow_credentials=cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.on_event("startup")
    async def on_startup() -> None:
        if not settings.is_production():
            # Schema is managed externally in production
            init_db()
        logger.info("Application started", environment=settings.ENVIRONMENT)

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    uvicorn.run(
        "student_records.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
    )


if __name__ == "__main__":  # pragma: no cover
    run()
