"""
Content routes: the reader feed, single-post reads, and the author workflow.
"""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_current_author, get_viewer_state
from api.middleware.rate_limit import get_rate_limit, limiter
from api.schemas.content import (
    ContentFeedResponse,
    ContentPostCreateRequest,
    ContentPostResponse,
    ContentPostSummary,
    ContentScheduleRequest,
)
from core.access import UPGRADE_REQUIRED, access_denied_reason
from core.domain.content import ContentItem, ContentType, slugify
from core.domain.subscription import SubscriptionState
from core.domain.user import User
from core.exceptions import MalformedContentItemError, UnknownTierError
from infrastructure.database import get_db
from infrastructure.database.models.content import ContentPost
from services.content_feed import (
    apply_content_item,
    get_post_by_slug,
    list_visible_posts,
    to_content_item,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content", tags=["content"])


# ============================================================================
# Reader endpoints
# ============================================================================


@router.get("/feed", response_model=ContentFeedResponse)
@limiter.limit(get_rate_limit("content_read"))
async def get_feed(
    request: Request,
    limit: int = Query(10, ge=1, le=100),
    content_type: ContentType | None = Query(None),
    viewer: SubscriptionState = Depends(get_viewer_state),
    db: AsyncSession = Depends(get_db),
):
    """
    List published posts the viewer may read, newest first.

    Restricted posts are filtered out by the database query itself.
    """
    posts = await list_visible_posts(db, viewer, content_type=content_type, limit=limit)
    return ContentFeedResponse(
        items=[ContentPostSummary.model_validate(p) for p in posts],
        total=len(posts),
    )


@router.get("/{slug}", response_model=ContentPostResponse)
@limiter.limit(get_rate_limit("content_read"))
async def read_post(
    request: Request,
    slug: str,
    viewer: SubscriptionState = Depends(get_viewer_state),
    db: AsyncSession = Depends(get_db),
):
    """
    Read a published post.

    Viewers without access get a 403 whose only detail is "Upgrade required".
    """
    post = await get_post_by_slug(db, slug)
    if not post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

    try:
        item = to_content_item(post)
    except (MalformedContentItemError, UnknownTierError) as e:
        logger.error(
            "Stored post %s is malformed; denying access: %s", post.id, e,
            extra={"post_id": post.id},
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UPGRADE_REQUIRED)

    reason = access_denied_reason(item, viewer)
    if reason:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=reason)
    return post


# ============================================================================
# Author endpoints
# ============================================================================


@router.post("", response_model=ContentPostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    body: ContentPostCreateRequest,
    current_user: User = Depends(get_current_author),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a draft post.

    Visibility rules are checked here, before the post can ever be published.
    """
    item = ContentItem(
        id=uuid4(),
        author_id=current_user.id,
        title=body.title,
        slug=slugify(body.slug) if body.slug else "",
        content=body.content,
        excerpt=body.excerpt,
        feature_image_url=body.feature_image_url,
        content_type=body.content_type,
        visibility=body.visibility,
        required_tier=body.required_min_tier,
        delivery_method=body.delivery_method,
    )
    if not item.slug:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Slug cannot be empty",
        )

    post = apply_content_item(
        ContentPost(
            id=str(item.id),
            author_id=str(current_user.id),
            tags=body.tags,
            allow_comments=body.allow_comments,
        ),
        item,
    )
    db.add(post)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A post with slug '{item.slug}' already exists",
        )
    await db.refresh(post)

    logger.info("Created draft post %s", post.id, extra={"post_id": post.id, "user_id": str(current_user.id)})
    return post


async def _get_owned_post(db: AsyncSession, post_id: str, user: User) -> ContentPost:
    """Load a post the user may manage (own post, or any post for admins)."""
    result = await db.execute(select(ContentPost).where(ContentPost.id == post_id))
    post = result.scalar_one_or_none()
    if not post or (post.author_id != str(user.id) and not user.is_admin):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


@router.post("/{post_id}/publish", response_model=ContentPostResponse)
async def publish_post(
    post_id: str,
    current_user: User = Depends(get_current_author),
    db: AsyncSession = Depends(get_db),
):
    """Make a draft or scheduled post live."""
    post = await _get_owned_post(db, post_id, current_user)
    item = to_content_item(post)
    item.publish(datetime.now(UTC))
    apply_content_item(post, item)
    await db.commit()
    await db.refresh(post)

    logger.info("Published post %s", post.id, extra={"post_id": post.id})
    return post


@router.post("/{post_id}/unpublish", response_model=ContentPostResponse)
async def unpublish_post(
    post_id: str,
    current_user: User = Depends(get_current_author),
    db: AsyncSession = Depends(get_db),
):
    """Move a post back to drafts."""
    post = await _get_owned_post(db, post_id, current_user)
    item = to_content_item(post)
    item.unpublish()
    apply_content_item(post, item)
    await db.commit()
    await db.refresh(post)
    return post


@router.post("/{post_id}/schedule", response_model=ContentPostResponse)
async def schedule_post(
    post_id: str,
    body: ContentScheduleRequest,
    current_user: User = Depends(get_current_author),
    db: AsyncSession = Depends(get_db),
):
    """Schedule a draft for later publishing."""
    post = await _get_owned_post(db, post_id, current_user)
    scheduled_for = body.scheduled_for
    if scheduled_for.tzinfo is None:
        scheduled_for = scheduled_for.replace(tzinfo=UTC)
    if scheduled_for <= datetime.now(UTC):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Scheduled time must be in the future",
        )

    item = to_content_item(post)
    item.schedule(scheduled_for)
    apply_content_item(post, item)
    await db.commit()
    await db.refresh(post)
    return post
