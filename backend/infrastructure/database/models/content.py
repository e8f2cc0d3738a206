"""
Content database models: blog posts and newsletter issues.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, String, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from core.domain.content import ContentStatus, ContentType, DeliveryMethod, Visibility

from .base import Base, TimestampMixin


class ContentPost(Base, TimestampMixin):
    """Authored post; visibility decides who may read it."""

    __tablename__ = "content_posts"
    __table_args__ = (
        # Minimum tier is set exactly when the post is tiered
        CheckConstraint(
            "(visibility = 'tiered' AND required_min_tier IS NOT NULL) "
            "OR (visibility <> 'tiered' AND required_min_tier IS NULL)",
            name="ck_content_posts_tier_matches_visibility",
        ),
        Index("ix_content_posts_status_published_at", "status", "published_at"),
    )

    # Primary key
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    # Owner
    author_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    # Content
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    slug: Mapped[str] = mapped_column(String(500), nullable=False, unique=True, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    feature_image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    content_type: Mapped[str] = mapped_column(
        String(50),
        default=ContentType.BLOG.value,
        nullable=False,
    )
    tags: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    allow_comments: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Access
    visibility: Mapped[str] = mapped_column(
        String(50),
        default=Visibility.PUBLIC.value,
        nullable=False,
    )
    required_min_tier: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Lifecycle
    status: Mapped[str] = mapped_column(
        String(50),
        default=ContentStatus.DRAFT.value,
        nullable=False,
    )
    delivery_method: Mapped[str] = mapped_column(
        String(50),
        default=DeliveryMethod.DASHBOARD.value,
        nullable=False,
    )
    published_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    scheduled_for: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<ContentPost(id={self.id}, slug={self.slug}, status={self.status})>"
