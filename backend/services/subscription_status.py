"""
Subscription state lookup for viewers.

Turns a user's stored roles and subscriber row into the explicit
``SubscriptionState`` value the access layer works with.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.subscription import SubscriptionState
from core.domain.user import User
from infrastructure.database.models.subscriber import Subscriber
from infrastructure.database.models.user import UserRoleAssignment

logger = logging.getLogger(__name__)


async def load_user(session: AsyncSession, user_id: str, email: Optional[str] = None) -> User:
    """Load a user's roles."""
    result = await session.execute(
        select(UserRoleAssignment.role).where(UserRoleAssignment.user_id == user_id)
    )
    return User(id=user_id, email=email, roles=frozenset(result.scalars().all()))


async def resolve_subscription_state(
    session: AsyncSession,
    user: Optional[User],
    now: Optional[datetime] = None,
) -> SubscriptionState:
    """
    Resolve the subscription state for a viewer.

    Anonymous viewers and users without a subscriber row get no access
    beyond public content. Admins get business-level access.

    Raises:
        UnknownTierError: If an active subscription carries an unknown tier
    """
    if user is None:
        return SubscriptionState.anonymous()

    if user.is_admin:
        return SubscriptionState.for_admin()

    result = await session.execute(
        select(Subscriber).where(Subscriber.user_id == str(user.id))
    )
    row = result.scalar_one_or_none()
    if row is None:
        return SubscriptionState.anonymous()

    state = SubscriptionState.from_record(
        subscribed=row.subscribed,
        tier=row.subscription_tier,
        subscription_end=row.subscription_end,
        now=now,
    )
    if row.subscribed and not state.subscribed:
        logger.info("Subscription for user %s has lapsed", user.id, extra={"user_id": str(user.id)})
    return state
