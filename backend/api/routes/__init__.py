"""API Routes."""

from fastapi import APIRouter

from .content import router as content_router
from .health import router as health_router
from .newsletter import router as newsletter_router
from .plans import router as plans_router

# Create main API router
api_router = APIRouter()

# Include route modules
api_router.include_router(health_router, tags=["Health"])
api_router.include_router(plans_router)
api_router.include_router(content_router)
api_router.include_router(newsletter_router)
