"""Canonical column layouts for the three logical tables."""
from dataclasses import dataclass

from gspread.utils import rowcol_to_a1


@dataclass(frozen=True)
class TableSchema:
    """A logical table: its key and the header row every sheet must carry."""

    name: str
    headers: tuple[str, ...]

    @property
    def width(self) -> int:
        return len(self.headers)

    @property
    def last_column(self) -> str:
        """Column letter of the last header cell, e.g. ``J`` for ten columns."""
        return rowcol_to_a1(1, self.width).rstrip("0123456789")

    @property
    def data_range(self) -> str:
        """Open-ended range covering every data row below the header."""
        return f"A2:{self.last_column}"

    def row_range(self, row_number: int) -> str:
        """A1 range for one full row, 1-indexed as the sheet counts rows."""
        return f"{rowcol_to_a1(row_number, 1)}:{rowcol_to_a1(row_number, self.width)}"


GOALS = TableSchema(
    name="goals",
    headers=(
        "ID",
        "Email",
        "Username",
        "Date",
        "Goal",
        "Priority",
        "TimeEstimate",
        "Status",
        "Reflection",
        "Blockers",
    ),
)

USERS = TableSchema(
    name="users",
    headers=(
        "Email",
        "Username",
        "FirstName",
        "LastName",
        "Phase",
        "Role",
        "UpdatedAt",
    ),
)

WEEKLY_SUMMARIES = TableSchema(
    name="weekly_summaries",
    headers=(
        "Email",
        "Username",
        "WeekStart",
        "WeekEnd",
        "Total",
        "Completed",
        "Partial",
        "Missed",
        "CompletionRate",
        "PerformanceStatus",
        "AIFeedback",
        "FinalRemarks",
        "RecordedAt",
    ),
)

ALL_TABLES = (GOALS, USERS, WEEKLY_SUMMARIES)
