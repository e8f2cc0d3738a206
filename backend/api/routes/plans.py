"""
Subscription plan catalog.
"""

from fastapi import APIRouter, HTTPException, status

from api.schemas.content import PlanResponse
from core.exceptions import UnknownTierError
from core.plans import get_plan, list_plans

router = APIRouter(prefix="/plans", tags=["plans"])


@router.get("", response_model=list[PlanResponse])
async def get_plans():
    """List plans from the lowest tier to the highest."""
    return list_plans()


@router.get("/{tier}", response_model=PlanResponse)
async def get_plan_by_tier(tier: str):
    """Get a single plan."""
    try:
        return get_plan(tier)
    except UnknownTierError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")
