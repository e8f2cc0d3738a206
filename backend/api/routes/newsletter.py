"""
Newsletter routes: email a published newsletter to eligible readers.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_current_author
from api.middleware.rate_limit import get_rate_limit, limiter
from api.schemas.content import NewsletterSendResponse
from core.domain.content import ContentType
from core.domain.user import User
from infrastructure.database import get_db
from infrastructure.database.models.content import ContentPost
from services import get_newsletter_dispatcher
from services.content_feed import to_content_item
from services.newsletter_dispatch import NewsletterDispatcher, load_recipients

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/newsletter", tags=["newsletter"])


@router.post("/{post_id}/send", response_model=NewsletterSendResponse)
@limiter.limit(get_rate_limit("newsletter_send"))
async def send_newsletter(
    request: Request,
    post_id: str,
    current_user: User = Depends(get_current_author),
    db: AsyncSession = Depends(get_db),
    dispatcher: NewsletterDispatcher = Depends(get_newsletter_dispatcher),
):
    """
    Email a published newsletter to every reader allowed to see it.

    Individual send failures are reported in ``errors`` and do not fail the
    request.
    """
    result = await db.execute(select(ContentPost).where(ContentPost.id == post_id))
    post = result.scalar_one_or_none()
    if not post or (post.author_id != str(current_user.id) and not current_user.is_admin):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

    item = to_content_item(post)
    if item.content_type != ContentType.NEWSLETTER:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only newsletters can be emailed",
        )

    recipients = await load_recipients(db)
    outcome = await dispatcher.dispatch(item, recipients)

    if outcome.total_count == 0:
        message = "No subscribers found for this content type"
    else:
        message = "Newsletter sent successfully"

    logger.info(
        "Newsletter %s sent by %s: %d/%d delivered",
        post.id, current_user.id, outcome.sent_count, outcome.total_count,
        extra={"post_id": post.id, "user_id": str(current_user.id)},
    )
    return NewsletterSendResponse(
        message=message,
        sent=outcome.sent_count,
        total=outcome.total_count,
        errors=[str(e) for e in outcome.errors],
    )
