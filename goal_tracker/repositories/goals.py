"""Goals repository - goal rows in the goals sheet."""
import logging
import secrets
import string
import time
from datetime import date, datetime
from typing import Optional, Union

from goal_tracker.errors import NotFoundError
from goal_tracker.models.goal import Goal, GoalCreate, GoalUpdate
from goal_tracker.storage.backend import TabularBackend
from goal_tracker.storage.codec import goal_to_row, row_to_goal
from goal_tracker.storage.schema import GOALS
from goal_tracker.utils.weekly_window import weekly_window


logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_lowercase + string.digits
ID_SUFFIX_LENGTH = 8


def generate_goal_id() -> str:
    """
    Build a goal id from the current epoch milliseconds and a random suffix.

    Examples:
        >>> generate_goal_id().startswith("goal_")
        True
    """
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f"goal_{int(time.time() * 1000)}_{suffix}"


class GoalsRepository:
    """Repository for goal rows."""

    def __init__(self, backend: TabularBackend):
        """Initialize repository with the selected backend."""
        self.backend = backend
        self.skipped_rows = 0

    async def _load(self) -> list[tuple[int, Goal]]:
        """Read and decode every goal row, keeping each row's position."""
        rows = await self.backend.read_rows(GOALS)
        goals = []
        for index, row in enumerate(rows):
            goal = row_to_goal(row)
            if goal is None:
                self.skipped_rows += 1
                logger.debug("Skipping malformed goal row %d", index + 2)
                continue
            goals.append((index, goal))
        return goals

    async def add(
        self,
        email: str,
        goal_create: GoalCreate,
        username: Optional[str] = None,
    ) -> Goal:
        """
        Create a new goal.

        Args:
            email: Owner email
            goal_create: Goal creation data
            username: Owner username, if the owner has a profile

        Returns:
            Stored goal including its generated id
        """
        goal = Goal(
            id=generate_goal_id(),
            email=email,
            username=username or "",
            date=goal_create.date.isoformat(),
            goal_text=goal_create.goal_text,
            priority=goal_create.priority,
            time_estimate=goal_create.time_estimate,
            status=goal_create.status,
        )

        await self.backend.ensure_table(GOALS)
        await self.backend.append_row(GOALS, goal_to_row(goal))

        return goal

    async def get(
        self,
        email: str,
        username: Optional[str] = None,
        on_date: Optional[str] = None,
    ) -> list[Goal]:
        """
        List one user's goals.

        Matches on username when given, otherwise on email.

        Args:
            email: Owner email
            username: Owner username; takes precedence over email
            on_date: Optional exact date filter (ISO string)

        Returns:
            Goals in the order they were appended
        """
        return [
            goal
            for _, goal in await self._load()
            if (goal.username == username if username else goal.email == email)
            and (not on_date or goal.date == on_date)
        ]

    async def get_all(
        self,
        email: Optional[str] = None,
        username: Optional[str] = None,
        on_date: Optional[str] = None,
    ) -> list[Goal]:
        """
        List goals across users.

        Every filter is optional; the ones given must all match.
        """
        return [
            goal
            for _, goal in await self._load()
            if (not email or goal.email == email)
            and (not username or goal.username == username)
            and (not on_date or goal.date == on_date)
        ]

    async def update(self, goal_id: str, goal_update: GoalUpdate) -> Goal:
        """
        Update a goal.

        Fields left unset on goal_update keep their stored values. The row is
        read, merged and written back without a lock, so the last concurrent
        write wins in full.

        Args:
            goal_id: Goal id
            goal_update: Fields to change

        Returns:
            Updated goal

        Raises:
            NotFoundError: If no goal has this id
        """
        for index, goal in await self._load():
            if goal.id != goal_id:
                continue

            updated = goal.model_copy(update=goal_update.model_dump(exclude_unset=True, exclude_none=True))
            await self.backend.ensure_table(GOALS)
            await self.backend.update_row(GOALS, index, goal_to_row(updated))
            return updated

        raise NotFoundError("Goal not found")

    async def get_weekly(
        self,
        email: str,
        username: Optional[str] = None,
        reference: Optional[Union[date, datetime]] = None,
    ) -> list[Goal]:
        """
        List one user's goals dated within the weekly window ending on reference.

        Goals whose date does not parse are left out.
        """
        window = weekly_window(reference)
        goals = await self.get(email, username=username)
        return [goal for goal in goals if window.contains(goal.date)]
