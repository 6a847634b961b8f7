"""
API Router - Main Entry Point
Aggregates all API endpoints for the student records service.
"""
from fastapi import APIRouter

from student_records.api import students
from student_records.config.settings import settings

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        404: {"description": "Not Found"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(students.router)


@router.get("/health", tags=["System Health"])
async def api_health_check():
    """Liveness probe; does not touch the database."""
    return {
        "status": "healthy",
        "version": settings.API_VERSION,
        "service": settings.APP_NAME,
    }
