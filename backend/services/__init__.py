"""
Service layer for business logic.
"""

from functools import lru_cache

from adapters.email import ResendEmailService
from core.interfaces.services import EmailService
from services.newsletter_dispatch import NewsletterDispatcher


@lru_cache
def get_email_service() -> EmailService:
    """
    Get singleton email service instance.

    Returns:
        Resend-backed EmailService (logs instead of sending without an API key)
    """
    return ResendEmailService()


def get_newsletter_dispatcher() -> NewsletterDispatcher:
    """
    Get a newsletter dispatcher wired to the configured email service.

    Returns:
        NewsletterDispatcher using batch settings from configuration
    """
    return NewsletterDispatcher(email_service=get_email_service())
