"""
Subscriber database models: paid subscriptions and newsletter sign-ups.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Subscriber(Base, TimestampMixin):
    """Paid subscription mirrored from the billing provider."""

    __tablename__ = "subscribers"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    stripe_customer_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    subscribed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # May hold a stale value after cancellation; only trusted while subscribed
    subscription_tier: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    subscription_end: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Subscriber(email={self.email}, subscribed={self.subscribed})>"


class NewsletterSubscriber(Base, TimestampMixin):
    """Newsletter sign-up, independent of any paid plan."""

    __tablename__ = "newsletter_subscribers"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    subscribed: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    subscription_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<NewsletterSubscriber(email={self.email}, subscribed={self.subscribed})>"
