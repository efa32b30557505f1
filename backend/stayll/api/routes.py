"""
API Routes Configuration
"""

from fastapi import APIRouter

from stayll.api.endpoints import health, listings, analytics

# Create main router
router = APIRouter()

# Include endpoint routers
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(listings.router, prefix="/listings", tags=["listings"])
router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
