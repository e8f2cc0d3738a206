"""Content domain entities."""
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from core.exceptions import InvalidTransitionError, MalformedContentItemError

from .subscription import SubscriptionTier, parse_tier


class Visibility(str, Enum):
    """Access policy attached to a post."""
    PUBLIC = "public"
    SUBSCRIBERS = "subscribers"
    TIERED = "tiered"


class ContentStatus(str, Enum):
    """Post lifecycle status."""
    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"


class ContentType(str, Enum):
    """Kind of post."""
    BLOG = "blog"
    NEWSLETTER = "newsletter"


class DeliveryMethod(str, Enum):
    """Where a published post shows up."""
    DASHBOARD = "dashboard"  # In-app feed only
    EMAIL = "email"          # Emailed only
    BOTH = "both"


_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Turn a title into a URL slug."""
    return _SLUG_SEPARATORS.sub("-", text.lower().strip()).strip("-")


def _coerce(enum_cls, value, what: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise MalformedContentItemError(f"Unrecognized {what}: {value!r}") from None


@dataclass
class ContentItem:
    """A blog post or newsletter issue with its access policy."""

    id: UUID = field(default_factory=uuid4)
    author_id: Optional[UUID] = None

    # Content
    title: str = ""
    slug: str = ""
    content: str = ""
    excerpt: Optional[str] = None
    feature_image_url: Optional[str] = None
    content_type: ContentType = ContentType.BLOG

    # Access
    visibility: Visibility = Visibility.PUBLIC
    required_tier: Optional[SubscriptionTier] = None

    # Lifecycle
    status: ContentStatus = ContentStatus.DRAFT
    delivery_method: DeliveryMethod = DeliveryMethod.DASHBOARD
    published_at: Optional[datetime] = None
    scheduled_for: Optional[datetime] = None

    def __post_init__(self):
        if isinstance(self.id, str):
            self.id = UUID(self.id)
        if isinstance(self.author_id, str):
            self.author_id = UUID(self.author_id)
        self.visibility = _coerce(Visibility, self.visibility, "visibility")
        self.status = _coerce(ContentStatus, self.status, "status")
        self.content_type = _coerce(ContentType, self.content_type, "content type")
        self.delivery_method = _coerce(DeliveryMethod, self.delivery_method, "delivery method")
        self.required_tier = parse_tier(self.required_tier)
        if not self.slug and self.title:
            self.slug = slugify(self.title)

        if self.visibility == Visibility.TIERED and self.required_tier is None:
            raise MalformedContentItemError("Tiered content requires a minimum tier")
        if self.visibility != Visibility.TIERED and self.required_tier is not None:
            raise MalformedContentItemError(
                f"Only tiered content may set a minimum tier (visibility={self.visibility.value})"
            )

    @property
    def is_published(self) -> bool:
        return self.status == ContentStatus.PUBLISHED

    @property
    def is_emailed(self) -> bool:
        """Check if publishing this post should send it by email."""
        return self.delivery_method in (DeliveryMethod.EMAIL, DeliveryMethod.BOTH)

    def publish(self, now: Optional[datetime] = None) -> None:
        """Make the post live."""
        if self.status == ContentStatus.PUBLISHED:
            raise InvalidTransitionError(self.status.value, ContentStatus.PUBLISHED.value)
        self.status = ContentStatus.PUBLISHED
        self.published_at = now or datetime.now(timezone.utc)
        self.scheduled_for = None

    def schedule(self, at: datetime) -> None:
        """Queue a draft for publishing at a later time."""
        if self.status != ContentStatus.DRAFT:
            raise InvalidTransitionError(self.status.value, ContentStatus.SCHEDULED.value)
        self.status = ContentStatus.SCHEDULED
        self.scheduled_for = at

    def unpublish(self) -> None:
        """Move the post back to drafts."""
        if self.status == ContentStatus.DRAFT:
            raise InvalidTransitionError(self.status.value, ContentStatus.DRAFT.value)
        self.status = ContentStatus.DRAFT
        self.published_at = None
        self.scheduled_for = None
