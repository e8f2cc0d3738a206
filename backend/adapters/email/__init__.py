"""Email adapters."""

from .resend_adapter import ResendEmailService

__all__ = ["ResendEmailService"]
