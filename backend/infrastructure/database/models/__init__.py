"""
SQLAlchemy database models.
"""

from .base import Base, TimestampMixin
from .content import ContentPost
from .subscriber import NewsletterSubscriber, Subscriber
from .user import UserRoleAssignment

__all__ = [
    "Base",
    "TimestampMixin",
    "ContentPost",
    "Subscriber",
    "NewsletterSubscriber",
    "UserRoleAssignment",
]
