"""User profile repository - one row per email in the users sheet."""
import logging
from datetime import datetime, timezone
from typing import Optional

from goal_tracker.errors import UsernameTakenError
from goal_tracker.models.user import UserIdentity, UserProfile, UserProfileUpsert
from goal_tracker.storage.backend import TabularBackend
from goal_tracker.storage.codec import profile_to_row, row_to_profile
from goal_tracker.storage.schema import USERS


logger = logging.getLogger(__name__)


def _coerce_phase(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class UserProfileRepository:
    """Repository for user profiles."""

    def __init__(self, backend: TabularBackend):
        """Initialize repository with the selected backend."""
        self.backend = backend
        self.skipped_rows = 0

    async def _load(self) -> list[tuple[int, UserProfile]]:
        rows = await self.backend.read_rows(USERS)
        profiles = []
        for index, row in enumerate(rows):
            profile = row_to_profile(row)
            if profile is None:
                self.skipped_rows += 1
                logger.debug("Skipping malformed user row %d", index + 2)
                continue
            profiles.append((index, profile))
        return profiles

    async def get_by_email(self, email: str) -> Optional[UserProfile]:
        """Return the profile for email, or None."""
        if not email:
            return None
        for _, profile in await self._load():
            if profile.email == email:
                return profile
        return None

    async def get_by_username(self, username: str) -> Optional[UserProfile]:
        """Return the profile owning username, or None."""
        if not username:
            return None
        for _, profile in await self._load():
            if profile.username == username:
                return profile
        return None

    async def upsert(self, profile: UserProfileUpsert) -> UserProfile:
        """
        Create or update the profile keyed by email.

        The username check and the write are separate steps with no lock, so
        two concurrent upserts claiming the same new username can both succeed.

        Args:
            profile: Profile data

        Returns:
            Stored profile with updated_at set to now

        Raises:
            UsernameTakenError: If another email already owns the username
        """
        payload = UserProfile(
            email=profile.email,
            username=profile.username,
            first_name=profile.first_name,
            last_name=profile.last_name,
            phase=_coerce_phase(profile.phase),
            role=profile.role,
            updated_at=datetime.now(timezone.utc),
        )

        owner = await self.get_by_username(payload.username)
        if owner is not None and owner.email != payload.email:
            raise UsernameTakenError(payload.username)

        await self.backend.ensure_table(USERS)

        row = profile_to_row(payload)
        for index, existing in await self._load():
            if existing.email == payload.email:
                await self.backend.update_row(USERS, index, row)
                return payload

        await self.backend.append_row(USERS, row)
        return payload

    async def list_all(self) -> list[UserIdentity]:
        """List the email and username of every profile."""
        return [
            UserIdentity(email=profile.email, username=profile.username)
            for _, profile in await self._load()
        ]
