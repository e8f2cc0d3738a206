"""
Scheduled Post Publisher.

Background loop that moves scheduled posts to published once their
scheduled time has passed.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.content import ContentStatus
from core.exceptions import ContentAccessError
from infrastructure.database import async_session_maker
from infrastructure.database.models.content import ContentPost
from services.content_feed import apply_content_item, to_content_item

logger = logging.getLogger(__name__)


async def publish_due_posts(db: AsyncSession, now: Optional[datetime] = None) -> list[ContentPost]:
    """
    Publish every scheduled post whose time has come.

    The caller owns the transaction and must commit. Posts whose stored
    data cannot be loaded are logged and left scheduled.

    Returns:
        Posts that were published
    """
    now = now or datetime.now(timezone.utc)
    result = await db.execute(
        select(ContentPost)
        .where(
            ContentPost.status == ContentStatus.SCHEDULED.value,
            ContentPost.scheduled_for <= now,
        )
        .order_by(ContentPost.scheduled_for)
    )
    published = []
    for post in result.scalars().all():
        try:
            item = to_content_item(post)
            item.publish(now)
        except ContentAccessError as e:
            logger.error(
                "Skipping scheduled post %s: %s", post.id, e,
                extra={"post_id": post.id},
            )
            continue

        apply_content_item(post, item)
        published.append(post)
        logger.info("Published scheduled post %s", post.id, extra={"post_id": post.id})

    return published


class ScheduledPublisherService:
    """Periodically publishes scheduled posts."""

    def __init__(self, check_interval: int = 60):
        self.is_running = False
        self.check_interval = check_interval

    async def start(self):
        """Start the publisher background loop."""
        if self.is_running:
            logger.warning("Scheduled publisher is already running")
            return

        self.is_running = True
        logger.info("Scheduled publisher started - checking every %d seconds", self.check_interval)

        while self.is_running:
            try:
                await self.process_due_posts()
            except Exception as e:
                logger.error("Scheduled publisher error: %s", e, exc_info=True)

            await asyncio.sleep(self.check_interval)

    async def stop(self):
        """Stop the publisher."""
        if not self.is_running:
            return

        self.is_running = False
        logger.info("Scheduled publisher stopped")

    async def process_due_posts(self):
        """Publish due posts in a single transaction."""
        async with async_session_maker() as db:
            try:
                published = await publish_due_posts(db)
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        if published:
            logger.info("Published %d scheduled posts", len(published))


scheduled_publisher = ScheduledPublisherService()
