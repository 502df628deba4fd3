"""API v1 router - aggregates all v1 endpoints."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from linkfolio.api.v1.links import router as links_router
from linkfolio.api.v1.public import router as public_router
from linkfolio.core.database import check_database

router = APIRouter(prefix="/api/v1")

# Include sub-routers
router.include_router(links_router)
router.include_router(public_router)


@router.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint; reports 503 when the database is unreachable."""
    if await check_database():
        return JSONResponse({"status": "healthy", "database": "ok"})
    return JSONResponse(
        {"status": "unhealthy", "database": "unavailable"},
        status_code=503,
    )
