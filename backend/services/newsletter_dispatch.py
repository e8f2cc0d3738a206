"""
Newsletter delivery.

Selects the newsletter readers allowed to see a published post and emails
them in fixed-size batches. Sends inside a batch run concurrently; batches
are separated by a fixed delay to stay under the provider's rate limit.
A failed send is recorded and never stops the remaining recipients.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, Iterator, Optional, Sequence, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.access import can_access
from core.domain.content import ContentItem
from core.domain.newsletter import Recipient
from core.domain.subscription import SubscriptionState
from core.exceptions import NotPublishedError, RecipientSendError
from core.interfaces.services import EmailService
from infrastructure.config.settings import settings
from infrastructure.database.models.subscriber import NewsletterSubscriber, Subscriber
from services.newsletter_email import NewsletterEmail, build_newsletter_email

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class DispatchResult:
    """Outcome of a newsletter send."""

    sent_count: int = 0
    total_count: int = 0
    batch_count: int = 0
    errors: list[RecipientSendError] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return len(self.errors)


def recipients_for(item: ContentItem, recipients: Iterable[Recipient]) -> list[Recipient]:
    """
    Newsletter readers who may see the post.

    Keeps recipients subscribed to the newsletter whose paid state passes
    the access check for the post. Input order is preserved.
    """
    return [
        r for r in recipients
        if r.subscribed_to_newsletter and can_access(item, r.paid_state)
    ]


def batched(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Split a sequence into consecutive chunks of ``size``; the last may be shorter."""
    if size < 1:
        raise ValueError("Batch size must be at least 1")
    for start in range(0, len(items), size):
        yield items[start:start + size]


class NewsletterDispatcher:
    """Sends a published post to every eligible newsletter recipient."""

    def __init__(
        self,
        email_service: EmailService,
        batch_size: Optional[int] = None,
        batch_delay_seconds: Optional[float] = None,
        frontend_url: Optional[str] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.email_service = email_service
        self.batch_size = batch_size if batch_size is not None else settings.newsletter_batch_size
        self.batch_delay_seconds = (
            batch_delay_seconds
            if batch_delay_seconds is not None
            else settings.newsletter_batch_delay_seconds
        )
        self.frontend_url = frontend_url or settings.frontend_url
        self._sleep = sleep

    async def dispatch(self, item: ContentItem, recipients: Iterable[Recipient]) -> DispatchResult:
        """
        Email the post to the eligible subset of ``recipients``.

        Args:
            item: Published post to send
            recipients: All known newsletter recipients

        Returns:
            DispatchResult with per-recipient errors

        Raises:
            NotPublishedError: If the post is not published
        """
        if not item.is_published:
            raise NotPublishedError(f"Post {item.id} is {item.status.value}, not published")

        eligible = recipients_for(item, recipients)
        result = DispatchResult(total_count=len(eligible))
        if not eligible:
            logger.info("No eligible recipients for post %s", item.id, extra={"post_id": str(item.id)})
            return result

        message = build_newsletter_email(item, self.frontend_url)

        batches = list(batched(eligible, self.batch_size))
        for index, batch in enumerate(batches, start=1):
            sent, errors = await self._send_batch(message, batch)
            result.sent_count += sent
            result.errors.extend(errors)
            result.batch_count += 1

            logger.info(
                "Newsletter batch %d/%d for post %s: %d sent, %d failed",
                index, len(batches), item.id, sent, len(errors),
                extra={"post_id": str(item.id), "batch": index, "recipient_count": len(batch)},
            )

            if index < len(batches) and self.batch_delay_seconds > 0:
                await self._sleep(self.batch_delay_seconds)

        logger.info(
            "Newsletter sent for post %s. Success: %d, Errors: %d",
            item.id, result.sent_count, result.failed_count,
            extra={"post_id": str(item.id), "recipient_count": result.total_count},
        )
        return result

    async def _send_batch(
        self,
        message: NewsletterEmail,
        batch: Sequence[Recipient],
    ) -> tuple[int, list[RecipientSendError]]:
        """Send one batch concurrently and wait for every send to settle."""
        outcomes = await asyncio.gather(
            *(
                self.email_service.send_newsletter(
                    to_email=recipient.email,
                    subject=message.subject,
                    html=message.html,
                    headers=message.headers,
                )
                for recipient in batch
            ),
            return_exceptions=True,
        )

        sent = 0
        errors: list[RecipientSendError] = []
        for recipient, outcome in zip(batch, outcomes):
            if isinstance(outcome, BaseException):
                if isinstance(outcome, asyncio.CancelledError):
                    raise outcome
                error = (
                    outcome
                    if isinstance(outcome, RecipientSendError)
                    else RecipientSendError(recipient.email, str(outcome))
                )
                logger.warning("Newsletter send failed: %s", error)
                errors.append(error)
            else:
                sent += 1
        return sent, errors


async def load_recipients(session: AsyncSession) -> list[Recipient]:
    """
    Load newsletter readers joined with their paid subscriptions.

    Readers without a paid subscription row get an anonymous paid state.

    Raises:
        UnknownTierError: If an active paid subscription carries an unknown tier
    """
    readers = (
        await session.execute(
            select(NewsletterSubscriber)
            .where(NewsletterSubscriber.subscribed.is_(True))
            .order_by(NewsletterSubscriber.created_at, NewsletterSubscriber.email)
        )
    ).scalars().all()
    if not readers:
        return []

    paid_rows = (
        await session.execute(
            select(Subscriber).where(
                func.lower(Subscriber.email).in_(sorted({r.email.lower() for r in readers}))
            )
        )
    ).scalars().all()
    paid_by_email = {row.email.lower(): row for row in paid_rows}

    recipients = []
    for reader in readers:
        paid = paid_by_email.get(reader.email.lower())
        paid_state = (
            SubscriptionState.from_record(
                subscribed=paid.subscribed,
                tier=paid.subscription_tier,
                subscription_end=paid.subscription_end,
            )
            if paid is not None
            else SubscriptionState.anonymous()
        )
        recipients.append(
            Recipient(
                email=reader.email,
                first_name=reader.first_name,
                last_name=reader.last_name,
                subscribed_to_newsletter=reader.subscribed,
                paid_state=paid_state,
            )
        )
    return recipients
