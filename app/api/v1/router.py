"""Main API router for v1 endpoints."""

from fastapi import APIRouter

from app.api.v1 import availability, charity, donations

router = APIRouter()

# Include all sub-routers
router.include_router(availability.router)
router.include_router(donations.router)
router.include_router(charity.router)


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "message": "GenHands API is running"}
