"""Request identity - resolves the bearer token to the current user."""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import BaseModel

from goal_tracker.config import settings
from goal_tracker.database import get_backend
from goal_tracker.models.user import UserRole
from goal_tracker.repositories.users import UserProfileRepository
from goal_tracker.utils.auth import read_unverified_email, verify_access_token


security = HTTPBearer(auto_error=False)

DEMO_EMAIL = "demo@example.com"


class CurrentUser(BaseModel):
    """Authenticated caller with the role and username from their profile."""

    email: str
    role: UserRole = UserRole.STUDENT
    username: Optional[str] = None

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.TEACHER, UserRole.ADMIN)


async def get_current_email(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """
    Dependency to get the caller's email from the bearer token.

    Without a configured JWT secret the token is read unverified (demo mode):
    its email claim is used, or the raw token when it is not a JWT, or a demo
    address when no token is sent.

    Raises:
        HTTPException: If a secret is configured and the token is missing or invalid (401)
    """
    if not settings.jwt_secret:
        if credentials is None:
            return DEMO_EMAIL
        token = credentials.credentials
        return read_unverified_email(token) or token

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        return verify_access_token(credentials.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )


async def get_current_user(
    email: str = Depends(get_current_email),
    backend=Depends(get_backend),
) -> CurrentUser:
    """Dependency to get the caller with role and username from their profile."""
    profile = await UserProfileRepository(backend).get_by_email(email)
    if profile is None:
        return CurrentUser(email=email)
    return CurrentUser(
        email=email,
        role=profile.role,
        username=profile.username or None,
    )
