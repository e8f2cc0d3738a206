"""
Resend email service adapter.
"""

import asyncio
import logging
from typing import Optional

import resend

from core.exceptions import RecipientSendError
from core.interfaces.services import EmailService
from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


class ResendEmailService(EmailService):
    """Email service using Resend API."""

    def __init__(self, api_key: Optional[str] = None, from_email: Optional[str] = None):
        self._api_key = api_key if api_key is not None else settings.resend_api_key
        if self._api_key:
            resend.api_key = self._api_key
        self._from_email = from_email or settings.resend_from_email

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def send_newsletter(
        self,
        to_email: str,
        subject: str,
        html: str,
        headers: dict[str, str] | None = None,
    ) -> None:
        """
        Send one newsletter email.

        The Resend SDK is blocking, so the call runs in a worker thread to let
        a batch of sends overlap.

        Args:
            to_email: Recipient email address
            subject: Email subject line
            html: Rendered HTML body
            headers: Extra MIME headers (List-Unsubscribe etc.)

        Raises:
            RecipientSendError: If Resend rejects the message or the call fails
        """
        if not self.is_configured:
            logger.info("[DEV] Newsletter email for %s: %s", to_email, subject)
            return

        params: dict = {
            "from": self._from_email,
            "to": [to_email],
            "subject": subject,
            "html": html,
        }
        if headers:
            params["headers"] = headers

        try:
            await asyncio.to_thread(resend.Emails.send, params)
        except Exception as e:
            raise RecipientSendError(to_email, str(e)) from e
