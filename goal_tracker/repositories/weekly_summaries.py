"""Weekly summary repository - one row per (email, week_start, week_end)."""
import logging
from datetime import datetime, timezone

from goal_tracker.models.weekly_summary import (
    FINAL_REMARKS,
    WeeklySummary,
    WeeklySummaryCreate,
    performance_for_rate,
)
from goal_tracker.storage.backend import TabularBackend
from goal_tracker.storage.codec import row_to_summary, summary_to_row
from goal_tracker.storage.schema import WEEKLY_SUMMARIES


logger = logging.getLogger(__name__)


def completion_rate(completed: int, total: int) -> float:
    """
    Percentage of completed goals, rounded to one decimal.

    Examples:
        >>> completion_rate(9, 10)
        90.0
        >>> completion_rate(0, 0)
        0.0
    """
    if not total:
        return 0.0
    return round(completed / total * 100, 1)


class WeeklySummaryRepository:
    """Repository for weekly summaries."""

    def __init__(self, backend: TabularBackend):
        """Initialize repository with the selected backend."""
        self.backend = backend
        self.skipped_rows = 0

    async def _load(self) -> list[tuple[int, WeeklySummary]]:
        rows = await self.backend.read_rows(WEEKLY_SUMMARIES)
        summaries = []
        for index, row in enumerate(rows):
            summary = row_to_summary(row)
            if summary is None:
                self.skipped_rows += 1
                logger.debug("Skipping malformed weekly summary row %d", index + 2)
                continue
            summaries.append((index, summary))
        return summaries

    async def upsert(self, summary: WeeklySummaryCreate) -> WeeklySummary:
        """
        Save a weekly summary, replacing any record for the same user and week.

        Args:
            summary: Counts for the week

        Returns:
            Stored summary with completion rate, performance status and
            final remarks filled in
        """
        rate = completion_rate(summary.completed, summary.total)
        status = performance_for_rate(rate)

        record = WeeklySummary(
            **summary.model_dump(),
            completion_rate=f"{rate:.1f}%",
            performance_status=status,
            final_remarks=FINAL_REMARKS[status],
            recorded_at=datetime.now(timezone.utc),
        )

        await self.backend.ensure_table(WEEKLY_SUMMARIES)

        row = summary_to_row(record)
        for index, existing in await self._load():
            if (
                existing.email == record.email
                and existing.week_start == record.week_start
                and existing.week_end == record.week_end
            ):
                await self.backend.update_row(WEEKLY_SUMMARIES, index, row)
                return record

        await self.backend.append_row(WEEKLY_SUMMARIES, row)
        return record

    async def list_all(self) -> list[WeeklySummary]:
        """List every stored weekly summary."""
        return [summary for _, summary in await self._load()]
