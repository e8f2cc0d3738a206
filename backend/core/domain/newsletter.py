"""Newsletter recipient entity."""
from dataclasses import dataclass, field
from typing import Optional

from .subscription import SubscriptionState


@dataclass(frozen=True)
class Recipient:
    """A newsletter reader together with their paid subscription state."""

    email: str
    subscribed_to_newsletter: bool = True
    paid_state: SubscriptionState = field(default_factory=SubscriptionState.anonymous)
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p) or self.email
