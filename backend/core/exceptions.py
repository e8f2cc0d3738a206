"""Exception types for content access and newsletter delivery."""


class ContentAccessError(Exception):
    """Base class for content access errors."""


class UnknownTierError(ContentAccessError, ValueError):
    """A tier value outside the catalog was used."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unknown subscription tier: {value!r}")


class MalformedContentItemError(ContentAccessError, ValueError):
    """Content item fields violate the visibility rules."""


class InvalidTransitionError(ContentAccessError):
    """Content lifecycle transition is not allowed from the current status."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move content from {current!r} to {target!r}")


class NotPublishedError(ContentAccessError):
    """Only published content can be delivered."""


class RecipientSendError(Exception):
    """Email dispatch to a single recipient failed."""

    def __init__(self, email: str, reason: str):
        self.email = email
        self.reason = reason
        super().__init__(f"Failed to send to {email}: {reason}")
