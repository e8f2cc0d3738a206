"""Subscription domain entities."""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from core.exceptions import UnknownTierError


class SubscriptionTier(str, Enum):
    """Available subscription tiers, lowest privilege first."""
    CORE = "core"
    ENHANCED = "enhanced"
    PREMIUM = "premium"
    BUSINESS = "business"


# Declaration order of SubscriptionTier is the privilege order.
TIER_ORDER: tuple[SubscriptionTier, ...] = tuple(SubscriptionTier)

_RANKS = {tier: index for index, tier in enumerate(TIER_ORDER)}

TierLike = Union[SubscriptionTier, str]


def parse_tier(value: Optional[TierLike]) -> Optional[SubscriptionTier]:
    """
    Resolve a stored tier value against the catalog.

    Empty values mean "no tier". Anything else must be a catalog member.

    Raises:
        UnknownTierError: If the value is not in the catalog
    """
    if value is None or value == "":
        return None
    if isinstance(value, SubscriptionTier):
        return value
    try:
        return SubscriptionTier(value)
    except ValueError:
        raise UnknownTierError(value) from None


def rank(tier: TierLike) -> int:
    """
    Get the privilege rank of a tier (0 = lowest).

    Raises:
        UnknownTierError: If the tier is missing or not in the catalog
    """
    resolved = parse_tier(tier)
    if resolved is None:
        raise UnknownTierError(tier)
    return _RANKS[resolved]


def tiers_at_or_below(tier: TierLike) -> tuple[SubscriptionTier, ...]:
    """Tiers whose rank does not exceed the given tier's rank."""
    return TIER_ORDER[: rank(tier) + 1]


@dataclass(frozen=True)
class SubscriptionState:
    """
    A viewer's paid subscription as reported by the billing side.

    The value may be stale. A tier only counts while ``subscribed`` is true,
    so a cancelled subscription that still carries its old tier grants nothing.
    """

    subscribed: bool = False
    tier: Optional[SubscriptionTier] = None
    subscription_end: Optional[datetime] = None

    def __post_init__(self):
        if isinstance(self.tier, str) and not isinstance(self.tier, SubscriptionTier):
            object.__setattr__(self, "tier", parse_tier(self.tier))

    @property
    def effective_tier(self) -> Optional[SubscriptionTier]:
        """Tier that actually grants access."""
        return self.tier if self.subscribed else None

    @classmethod
    def anonymous(cls) -> "SubscriptionState":
        """State for a viewer with no paid subscription."""
        return cls(subscribed=False, tier=None)

    @classmethod
    def for_admin(cls) -> "SubscriptionState":
        """Admins read everything a business subscriber can."""
        return cls(subscribed=True, tier=SubscriptionTier.BUSINESS)

    @classmethod
    def from_record(
        cls,
        subscribed: bool,
        tier: Optional[str],
        subscription_end: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> "SubscriptionState":
        """
        Build state from a stored subscriber row.

        A row past its ``subscription_end`` counts as not subscribed. Inactive
        rows drop their tier without validating it; an unknown tier on an
        active row raises.

        Args:
            subscribed: Stored subscribed flag
            tier: Stored tier value (may be stale)
            subscription_end: End of the paid period, if any
            now: Reference time (defaults to current UTC time)

        Raises:
            UnknownTierError: If an active row carries a tier outside the catalog
        """
        now = now or datetime.now(timezone.utc)
        if subscription_end is not None and subscription_end.tzinfo is None:
            subscription_end = subscription_end.replace(tzinfo=timezone.utc)

        active = bool(subscribed) and (subscription_end is None or subscription_end > now)
        if not active:
            return cls(subscribed=False, tier=None, subscription_end=subscription_end)

        return cls(
            subscribed=True,
            tier=parse_tier(tier),
            subscription_end=subscription_end,
        )
