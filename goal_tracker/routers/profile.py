"""Profile router - API endpoints for the caller's profile."""
import re

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from goal_tracker.database import get_backend
from goal_tracker.errors import UsernameTakenError
from goal_tracker.models.user import UserProfile, UserProfileUpsert, UserRole
from goal_tracker.repositories.users import UserProfileRepository
from goal_tracker.routers.auth import get_current_email


router = APIRouter(prefix="/profile", tags=["profile"])

USERNAME_ATTEMPTS = 3
USERNAME_MAX_LENGTH = 20


class ProfileRequest(BaseModel):
    """Profile update request model."""

    username: str
    first_name: str = ""
    last_name: str = ""
    phase: int = Field(default=0, ge=0, le=7)
    role: UserRole = UserRole.STUDENT


def base_username(email: str) -> str:
    """
    Derive a default username from the local part of an email.

    Examples:
        >>> base_username("Jane.Doe+work@example.com")
        'janedoework'
        >>> base_username("@example.com")
        'user'
    """
    local = email.split("@")[0].lower()
    return re.sub(r"[^a-z0-9]", "", local)[:USERNAME_MAX_LENGTH] or "user"


@router.get("", response_model=UserProfile)
async def get_profile(
    email: str = Depends(get_current_email),
    backend=Depends(get_backend),
):
    """
    Get the caller's profile, creating a student profile on first visit.

    - Username comes from the email, with a numeric suffix if taken
    - Returns 404 if every candidate username is taken
    """
    repository = UserProfileRepository(backend)

    profile = await repository.get_by_email(email)
    if profile is not None:
        return profile

    base = base_username(email)
    for attempt in range(USERNAME_ATTEMPTS):
        candidate = base if attempt == 0 else f"{base}{attempt}"
        try:
            return await repository.upsert(
                UserProfileUpsert(email=email, username=candidate)
            )
        except UsernameTakenError:
            continue

    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Profile not found",
    )


@router.post("", response_model=UserProfile)
async def save_profile(
    profile: ProfileRequest,
    email: str = Depends(get_current_email),
    backend=Depends(get_backend),
):
    """
    Create or update the caller's profile.

    - Username is trimmed and lowercased
    - Returns 400 if username is blank
    - Returns 409 if username belongs to another user
    """
    username = profile.username.strip().lower()
    if not username:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username is required",
        )

    repository = UserProfileRepository(backend)
    try:
        return await repository.upsert(
            UserProfileUpsert(
                email=email,
                username=username,
                first_name=profile.first_name.strip(),
                last_name=profile.last_name.strip(),
                phase=profile.phase,
                role=profile.role,
            )
        )
    except UsernameTakenError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already taken",
        )
