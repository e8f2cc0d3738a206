"""
Content API schemas for posts, the feed, and plans.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.domain.content import ContentType, DeliveryMethod, Visibility
from core.domain.subscription import SubscriptionTier

# ============================================================================
# Post Schemas
# ============================================================================


class ContentPostCreateRequest(BaseModel):
    """Request to create a draft post."""

    title: str = Field(..., min_length=1, max_length=500)
    slug: str | None = Field(None, max_length=500, description="Derived from title when omitted")
    content: str = Field(..., min_length=1)
    excerpt: str | None = None
    feature_image_url: str | None = Field(None, max_length=1000)
    content_type: ContentType = ContentType.BLOG
    visibility: Visibility = Visibility.PUBLIC
    required_min_tier: SubscriptionTier | None = None
    delivery_method: DeliveryMethod = DeliveryMethod.DASHBOARD
    tags: list[str] = Field(default_factory=list)
    allow_comments: bool = True

    @model_validator(mode="after")
    def check_tier_matches_visibility(self) -> "ContentPostCreateRequest":
        if self.visibility == Visibility.TIERED and self.required_min_tier is None:
            raise ValueError("required_min_tier is required for tiered visibility")
        if self.visibility != Visibility.TIERED:
            self.required_min_tier = None
        return self


class ContentScheduleRequest(BaseModel):
    """Request to schedule a draft."""

    scheduled_for: datetime


class ContentPostSummary(BaseModel):
    """Post listing entry (no body)."""

    id: str
    title: str
    slug: str
    excerpt: str | None
    feature_image_url: str | None
    content_type: str
    visibility: str
    required_min_tier: str | None
    status: str
    delivery_method: str
    published_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class ContentPostResponse(ContentPostSummary):
    """Full post."""

    author_id: str
    content: str
    tags: list[str] | None = None
    allow_comments: bool
    scheduled_for: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ContentFeedResponse(BaseModel):
    """Posts visible to the current viewer."""

    items: list[ContentPostSummary]
    total: int


# ============================================================================
# Newsletter Schemas
# ============================================================================


class NewsletterSendResponse(BaseModel):
    """Outcome of a newsletter send."""

    message: str
    sent: int
    total: int
    errors: list[str] = Field(default_factory=list)


# ============================================================================
# Plan Schemas
# ============================================================================


class PlanResponse(BaseModel):
    """Subscription plan."""

    tier: str
    rank: int
    name: str
    price_monthly: int
    description: str
    features: list[str]
