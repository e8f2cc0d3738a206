"""
API dependencies for authentication and authorization.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.subscription import SubscriptionState
from core.domain.user import User
from core.security import TokenService
from infrastructure.config import get_settings
from infrastructure.database import get_db
from services.subscription_status import load_user, resolve_subscription_state

settings = get_settings()
token_service = TokenService(
    secret_key=settings.jwt_secret_key,
    algorithm=settings.jwt_algorithm,
    access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
)


def _extract_token(request: Request, authorization: str | None) -> str | None:
    """Bearer token from the Authorization header, falling back to the cookie."""
    if authorization and authorization.startswith("Bearer "):
        parts = authorization.split(" ", 1)
        if len(parts) > 1 and parts[1]:
            return parts[1]
    return request.cookies.get("access_token")


async def get_optional_user(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """
    Dependency to get the current user, or None for anonymous visitors.

    A token that is present but invalid is rejected rather than treated as
    anonymous.
    """
    token = _extract_token(request, authorization)
    if not token:
        return None

    payload = token_service.verify_access_token(token)
    if payload:
        try:
            return await load_user(db, str(UUID(payload.sub)), payload.email)
        except ValueError:
            pass

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> User:
    """Dependency to get the current authenticated user."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_current_author(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """
    Dependency to get the current user if they may author posts.

    Ensures the user has the author or admin role.
    """
    if not current_user.can_author:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Author access required",
        )
    return current_user


async def get_viewer_state(
    user: Annotated[User | None, Depends(get_optional_user)],
    db: AsyncSession = Depends(get_db),
) -> SubscriptionState:
    """Dependency resolving the viewer's subscription state for access checks."""
    return await resolve_subscription_state(db, user)
