"""User domain entity."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID


class UserRole(StrEnum):
    """Roles a user can hold on the platform."""

    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"
    INSTRUCTIONAL_DESIGNER = "instructional_designer"
    FACILITATOR = "facilitator"
    AGENT = "agent"
    PROSPECT = "prospect"
    BUSINESS_LEADER = "business_leader"
    AUTHOR = "author"


@dataclass
class User:
    """Authenticated user as seen by the content layer."""

    id: UUID
    email: str | None = None
    roles: frozenset[UserRole] = field(default_factory=frozenset)

    def __post_init__(self):
        if isinstance(self.id, str):
            self.id = UUID(self.id)
        # Role values outside the enum are ignored rather than trusted
        known = {role.value for role in UserRole}
        self.roles = frozenset(UserRole(r) for r in self.roles if r in known)

    @property
    def is_admin(self) -> bool:
        """Check if user has admin privileges."""
        return UserRole.ADMIN in self.roles

    @property
    def can_author(self) -> bool:
        """Check if user may create and publish posts."""
        return self.is_admin or UserRole.AUTHOR in self.roles
