"""User profile model definitions."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Access role of a profile."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class UserProfileBase(BaseModel):
    """Base profile fields."""

    email: str
    username: str
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.STUDENT


class UserProfileUpsert(UserProfileBase):
    """Profile create-or-update model."""

    username: str = Field(min_length=1)
    phase: int = Field(default=0, ge=0, le=7)


class UserProfile(UserProfileBase):
    """Profile as stored in the users sheet."""

    phase: int = 0
    updated_at: Optional[datetime] = None


class UserIdentity(BaseModel):
    """Email and username pair used for batch enumeration."""

    email: str
    username: str = ""
