"""Service interfaces for external integrations."""

from abc import ABC, abstractmethod


class EmailService(ABC):
    """Abstract service for transactional email."""

    @abstractmethod
    async def send_newsletter(
        self,
        to_email: str,
        subject: str,
        html: str,
        headers: dict[str, str] | None = None,
    ) -> None:
        """
        Send one newsletter email.

        Raises:
            RecipientSendError: If the provider rejects or fails the send
        """
        ...
