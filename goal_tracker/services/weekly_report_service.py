"""Weekly report service - stats over the weekly window and summary recording."""
import logging
from datetime import date, datetime
from typing import Optional, Union

from goal_tracker.models.goal import Goal, GoalStatus
from goal_tracker.models.weekly_report import WeeklyReport, WeeklyStats
from goal_tracker.models.weekly_summary import (
    DEFAULT_AI_FEEDBACK,
    WeeklySummary,
    WeeklySummaryCreate,
)
from goal_tracker.repositories.goals import GoalsRepository
from goal_tracker.repositories.users import UserProfileRepository
from goal_tracker.repositories.weekly_summaries import WeeklySummaryRepository
from goal_tracker.storage.backend import TabularBackend
from goal_tracker.utils.weekly_window import weekly_window


logger = logging.getLogger(__name__)

Reference = Optional[Union[date, datetime]]


def summarize_goals(goals: list[Goal]) -> WeeklyStats:
    """
    Count goals by status.

    Args:
        goals: Goals inside the window

    Returns:
        WeeklyStats; percentages are 0 when there are no goals
    """
    total = len(goals)
    completed = sum(1 for g in goals if g.status == GoalStatus.COMPLETED)
    partial = sum(1 for g in goals if g.status == GoalStatus.PARTIALLY_COMPLETED)
    missed = sum(1 for g in goals if g.status == GoalStatus.NOT_COMPLETED)

    if not total:
        return WeeklyStats()

    return WeeklyStats(
        total_goals=total,
        completed=completed,
        partially_completed=partial,
        not_completed=missed,
        completed_percentage=completed / total * 100,
        partial_percentage=partial / total * 100,
        missed_percentage=missed / total * 100,
    )


class WeeklyReportService:
    """Service for weekly reports across the three repositories."""

    def __init__(self, backend: TabularBackend):
        """Initialize service with the selected backend."""
        self.goals = GoalsRepository(backend)
        self.profiles = UserProfileRepository(backend)
        self.summaries = WeeklySummaryRepository(backend)

    async def build_report(
        self,
        email: str,
        username: Optional[str] = None,
        reference: Reference = None,
        save: bool = False,
        ai_feedback: Optional[str] = None,
    ) -> WeeklyReport:
        """
        Build the weekly report for one user.

        Args:
            email: User email
            username: User username; takes precedence over email for matching
            reference: Last day of the window; defaults to today
            save: Also store the summary when the week has goals
            ai_feedback: Feedback text to store with the summary

        Returns:
            WeeklyReport for the window ending on reference
        """
        window = weekly_window(reference)
        goals = await self.goals.get_weekly(email, username=username, reference=reference)
        stats = summarize_goals(goals)

        saved = False
        if save and stats.total_goals:
            await self._save(email, username, window.start_date, window.end_date, stats, ai_feedback)
            saved = True

        return WeeklyReport(
            **stats.model_dump(),
            week_start=window.start_date,
            week_end=window.end_date,
            saved=saved,
        )

    async def _save(
        self,
        email: str,
        username: Optional[str],
        week_start: str,
        week_end: str,
        stats: WeeklyStats,
        ai_feedback: Optional[str],
    ) -> WeeklySummary:
        return await self.summaries.upsert(
            WeeklySummaryCreate(
                email=email,
                username=username or "",
                week_start=week_start,
                week_end=week_end,
                total=stats.total_goals,
                completed=stats.completed,
                partial=stats.partially_completed,
                missed=stats.not_completed,
                ai_feedback=ai_feedback or DEFAULT_AI_FEEDBACK,
            )
        )

    async def record_all(self, reference: Reference = None) -> list[WeeklySummary]:
        """
        Record a weekly summary for every profile that has goals in the window.

        Args:
            reference: Last day of the window; defaults to today

        Returns:
            Summaries that were stored
        """
        window = weekly_window(reference)
        recorded = []

        for identity in await self.profiles.list_all():
            goals = await self.goals.get_weekly(
                identity.email,
                username=identity.username or None,
                reference=reference,
            )
            if not goals:
                continue

            summary = await self._save(
                identity.email,
                identity.username,
                window.start_date,
                window.end_date,
                summarize_goals(goals),
                None,
            )
            logger.info("Weekly summary recorded for %s", identity.email)
            recorded.append(summary)

        return recorded
