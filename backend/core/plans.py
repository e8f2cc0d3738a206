"""
Plan configuration for subscription tiers.

This module is the single source of truth for plan pricing and features.
It lives in core/ so both service and API layers can import from it
without creating circular dependencies.
"""

from core.domain.subscription import TIER_ORDER, SubscriptionTier, TierLike, rank

# Plan configuration keyed by tier value
PLANS = {
    SubscriptionTier.CORE.value: {
        "name": "Core",
        "price_monthly": 40,
        "description": "Essential Medicare training resources for growing agents",
        "features": [
            "Extensive Medicare-related content",
            "Detailed insurance carrier information",
            "Sales training materials",
            "Regularly updated industry news feed",
            "AI Chatbot for instant information access",
        ],
    },
    SubscriptionTier.ENHANCED.value: {
        "name": "Enhanced",
        "price_monthly": 55,
        "description": "Core resources plus live training sessions",
        "features": [
            "All Core plan features",
            "One live instructor-led webinar per week",
            "Priority AI Chatbot support",
            "Advanced sales training materials",
            "Expert Q&A sessions",
        ],
    },
    SubscriptionTier.PREMIUM.value: {
        "name": "Premium",
        "price_monthly": 75,
        "description": "Complete training solution with unlimited access",
        "features": [
            "Unlimited live instructor-led webinars",
            "Full access to Learning Management System (LMS)",
            "Interactive e-learning courses with tracking",
            "Complete library of On-Demand Training Videos",
            "Professional profile publishing capabilities",
            "Priority AI Chatbot support",
        ],
    },
    SubscriptionTier.BUSINESS.value: {
        "name": "Business Leader",
        "price_monthly": 150,
        "description": "For teams and growing agencies",
        "features": [
            "All Premium features",
            "Team management (up to 10 agents)",
            "Bulk enrollment",
            "Advanced analytics",
            "Custom branding",
            "Dedicated account manager",
        ],
    },
}


def get_plan(tier: TierLike) -> dict:
    """
    Get plan details for a tier, including its privilege rank.

    Raises:
        UnknownTierError: If the tier is not in the catalog
    """
    tier_rank = rank(tier)
    key = TIER_ORDER[tier_rank].value
    return {"tier": key, "rank": tier_rank, **PLANS[key]}


def list_plans() -> list[dict]:
    """All plans, lowest tier first."""
    return [get_plan(tier) for tier in TIER_ORDER]
