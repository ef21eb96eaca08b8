"""
API Router

All endpoints live under /api.
"""

from fastapi import APIRouter

from mtc_api.schemas.common import HealthResponse

from . import admin, auth, projects, users

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(admin.router, prefix="/admin", tags=["Admin"])
router.include_router(users.router, prefix="/users", tags=["Users"])


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Liveness probe."""
    return {"status": "OK", "message": "MTC Backend is running!"}
