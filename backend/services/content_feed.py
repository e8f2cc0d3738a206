"""
Content feed queries.

Builds database filters that return only the posts a viewer may read, so
restricted posts never leave the database. The filter mirrors
``core.access.can_access`` rule for rule.
"""

import logging
from typing import Optional, Sequence

from sqlalchemy import ColumnElement, Select, and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.content import (
    ContentItem,
    ContentStatus,
    ContentType,
    DeliveryMethod,
    Visibility,
)
from core.domain.subscription import SubscriptionState, tiers_at_or_below
from infrastructure.database.models.content import ContentPost

logger = logging.getLogger(__name__)

# Posts shown in the in-app feed
FEED_DELIVERY_METHODS = (DeliveryMethod.DASHBOARD, DeliveryMethod.BOTH)


def build_visibility_filter(viewer: SubscriptionState) -> ColumnElement[bool]:
    """
    Build the visibility predicate for a viewer.

    - not subscribed: public posts only
    - subscribed without a tier: public and subscriber posts
    - subscribed with tier T: additionally tiered posts requiring T or lower
    """
    if not viewer.subscribed:
        return ContentPost.visibility == Visibility.PUBLIC.value

    open_to_subscribers = ContentPost.visibility.in_(
        [Visibility.PUBLIC.value, Visibility.SUBSCRIBERS.value]
    )
    tier = viewer.effective_tier
    if tier is None:
        return open_to_subscribers

    return or_(
        open_to_subscribers,
        and_(
            ContentPost.visibility == Visibility.TIERED.value,
            ContentPost.required_min_tier.in_([t.value for t in tiers_at_or_below(tier)]),
        ),
    )


def build_feed_query(
    viewer: SubscriptionState,
    delivery_methods: Sequence[DeliveryMethod] = FEED_DELIVERY_METHODS,
    content_type: Optional[ContentType] = None,
    limit: Optional[int] = None,
) -> Select:
    """
    Build the published-posts query for a viewer, newest first.

    Args:
        viewer: Viewer's subscription state
        delivery_methods: Delivery methods to include
        content_type: Restrict to blogs or newsletters
        limit: Maximum number of posts
    """
    query = (
        select(ContentPost)
        .where(ContentPost.status == ContentStatus.PUBLISHED.value)
        .where(build_visibility_filter(viewer))
        .where(ContentPost.delivery_method.in_([m.value for m in delivery_methods]))
        .order_by(ContentPost.published_at.desc())
    )
    if content_type is not None:
        query = query.where(ContentPost.content_type == content_type.value)
    if limit:
        query = query.limit(limit)
    return query


async def list_visible_posts(
    session: AsyncSession,
    viewer: SubscriptionState,
    content_type: Optional[ContentType] = None,
    limit: Optional[int] = None,
) -> list[ContentPost]:
    """Fetch the feed for a viewer."""
    result = await session.execute(
        build_feed_query(viewer, content_type=content_type, limit=limit)
    )
    return list(result.scalars().all())


async def get_post_by_slug(session: AsyncSession, slug: str) -> Optional[ContentPost]:
    """Fetch a published post by slug, regardless of who is asking."""
    result = await session.execute(
        select(ContentPost).where(
            ContentPost.slug == slug,
            ContentPost.status == ContentStatus.PUBLISHED.value,
        )
    )
    return result.scalar_one_or_none()


def to_content_item(post: ContentPost) -> ContentItem:
    """
    Convert a stored post to a validated domain item.

    Raises:
        MalformedContentItemError: If the stored visibility data is invalid
        UnknownTierError: If the stored minimum tier is not in the catalog
    """
    return ContentItem(
        id=post.id,
        author_id=post.author_id,
        title=post.title,
        slug=post.slug,
        content=post.content,
        excerpt=post.excerpt,
        feature_image_url=post.feature_image_url,
        content_type=post.content_type,
        visibility=post.visibility,
        required_tier=post.required_min_tier,
        status=post.status,
        delivery_method=post.delivery_method,
        published_at=post.published_at,
        scheduled_for=post.scheduled_for,
    )


def apply_content_item(post: ContentPost, item: ContentItem) -> ContentPost:
    """Copy a domain item's state onto a stored post."""
    post.title = item.title
    post.slug = item.slug
    post.content = item.content
    post.excerpt = item.excerpt
    post.feature_image_url = item.feature_image_url
    post.content_type = item.content_type.value
    post.visibility = item.visibility.value
    post.required_min_tier = item.required_tier.value if item.required_tier else None
    post.status = item.status.value
    post.delivery_method = item.delivery_method.value
    post.published_at = item.published_at
    post.scheduled_for = item.scheduled_for
    return post
