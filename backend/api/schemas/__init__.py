"""API schemas."""

from .content import (
    ContentFeedResponse,
    ContentPostCreateRequest,
    ContentPostResponse,
    ContentPostSummary,
    ContentScheduleRequest,
    NewsletterSendResponse,
    PlanResponse,
)

__all__ = [
    "ContentFeedResponse",
    "ContentPostCreateRequest",
    "ContentPostResponse",
    "ContentPostSummary",
    "ContentScheduleRequest",
    "NewsletterSendResponse",
    "PlanResponse",
]
