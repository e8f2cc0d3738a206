"""
Content access resolution.

Pure decision logic: given a post's visibility and a viewer's subscription
state, decide whether the viewer may read it. No I/O.
"""

import logging
from typing import Optional

from core.domain.content import ContentItem, Visibility
from core.domain.subscription import SubscriptionState, rank
from core.exceptions import UnknownTierError

logger = logging.getLogger(__name__)

# The only denial message ever shown to end users
UPGRADE_REQUIRED = "Upgrade required"


def can_access(item: ContentItem, viewer: SubscriptionState) -> bool:
    """
    Decide whether a viewer may read a post.

    Rules, in order:
    - public: always
    - subscribers: any active subscription, tier irrelevant
    - tiered: active subscription whose tier ranks at or above the post's
      required tier

    Unrecognized visibility or tier data fails closed and is logged as a
    data-integrity defect.
    """
    visibility = item.visibility

    if visibility == Visibility.PUBLIC:
        return True

    if visibility == Visibility.SUBSCRIBERS:
        return viewer.subscribed

    if visibility == Visibility.TIERED:
        viewer_tier = viewer.effective_tier
        if viewer_tier is None:
            return False
        if item.required_tier is None:
            logger.error("Tiered post %s has no required tier; denying access", item.id)
            return False
        try:
            return rank(viewer_tier) >= rank(item.required_tier)
        except UnknownTierError as e:
            logger.error("Tier data error on post %s: %s; denying access", item.id, e)
            return False

    logger.error("Post %s has unrecognized visibility %r; denying access", item.id, visibility)
    return False


def access_denied_reason(item: ContentItem, viewer: SubscriptionState) -> Optional[str]:
    """User-facing denial message, or None when access is allowed."""
    return None if can_access(item, viewer) else UPGRADE_REQUIRED
