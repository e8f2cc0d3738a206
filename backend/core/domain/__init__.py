# Domain Entities
# Pure business objects with no external dependencies
from .content import (
    ContentItem,
    ContentStatus,
    ContentType,
    DeliveryMethod,
    Visibility,
    slugify,
)
from .newsletter import Recipient
from .subscription import (
    TIER_ORDER,
    SubscriptionState,
    SubscriptionTier,
    parse_tier,
    rank,
    tiers_at_or_below,
)
from .user import User, UserRole

__all__ = [
    "User",
    "UserRole",
    "ContentItem",
    "ContentStatus",
    "ContentType",
    "DeliveryMethod",
    "Visibility",
    "slugify",
    "Recipient",
    "SubscriptionState",
    "SubscriptionTier",
    "TIER_ORDER",
    "parse_tier",
    "rank",
    "tiers_at_or_below",
]
