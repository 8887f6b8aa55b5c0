"""
Row codec: typed entities <-> positional string cells.

Reads are lenient. Short or incomplete rows decode to ``None`` and callers
drop them. Writes produce the full width of the row's layout with ``""``
for empty optional fields.
"""
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Sequence

from goal_tracker.models.goal import Goal, GoalStatus
from goal_tracker.models.user import UserProfile, UserRole
from goal_tracker.models.weekly_summary import PerformanceStatus, WeeklySummary


DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")

MIN_GOAL_CELLS = 7

# Index of the date cell when the username column is present.
CURRENT_DATE_INDEX = 3


class GoalRowLayout(str, Enum):
    """Physical shape of a goal row."""

    CURRENT = "current"  # ID, Email, Username, Date, ...
    LEGACY = "legacy"  # ID, Email, Date, ... (no username column)


def _cell(row: Sequence[str], index: int) -> str:
    """Cell text at index, or "" when the sheet omitted trailing blanks."""
    if index < len(row) and row[index] is not None:
        return str(row[index])
    return ""


def _to_int(value: str, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def format_timestamp(value: Optional[datetime]) -> str:
    """
    Format a timestamp as UTC ISO-8601 with milliseconds and a Z suffix.

    Examples:
        >>> format_timestamp(datetime(2026, 10, 19, 8, 15, tzinfo=timezone.utc))
        '2026-10-19T08:15:00.000Z'
    """
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp cell, returning None for blank or garbled text."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_enum(enum_cls, value: str, default):
    """Match stored text against enum values, ignoring case and spacing."""
    compact = value.replace(" ", "").lower()
    for member in enum_cls:
        if member.value.replace(" ", "").lower() == compact:
            return member
    return default


# Goals


def detect_goal_layout(row: Sequence[str]) -> GoalRowLayout:
    """
    Resolve which layout a goal row was written with.

    A date-shaped cell at index 3 means the username column is present.

    Examples:
        >>> detect_goal_layout(["g1", "a@x.io", "alice", "2026-10-19", "Read"])
        <GoalRowLayout.CURRENT: 'current'>
        >>> detect_goal_layout(["g1", "a@x.io", "2026-10-19", "Read", "High"])
        <GoalRowLayout.LEGACY: 'legacy'>
    """
    if DATE_PATTERN.match(_cell(row, CURRENT_DATE_INDEX)):
        return GoalRowLayout.CURRENT
    return GoalRowLayout.LEGACY


def row_to_goal(
    row: Sequence[str],
    layout: Optional[GoalRowLayout] = None,
) -> Optional[Goal]:
    """
    Decode a goal row.

    Args:
        row: Cells as returned by the backend
        layout: Explicit layout; detected from the row when omitted

    Returns:
        Goal, or None when the row is too short or lacks a date or goal text
    """
    if not row or len(row) < MIN_GOAL_CELLS:
        return None

    if layout is None:
        layout = detect_goal_layout(row)

    if layout is GoalRowLayout.CURRENT:
        username = _cell(row, 2)
        offset = 3
    else:
        username = ""
        offset = 2

    date_text = _cell(row, offset)
    goal_text = _cell(row, offset + 1)
    if not date_text or not goal_text:
        return None

    return Goal(
        id=_cell(row, 0),
        email=_cell(row, 1),
        username=username,
        date=date_text,
        goal_text=goal_text,
        priority=_cell(row, offset + 2),
        time_estimate=_cell(row, offset + 3),
        status=_parse_enum(GoalStatus, _cell(row, offset + 4), GoalStatus.NOT_COMPLETED),
        reflection=_cell(row, offset + 5),
        blockers=_cell(row, offset + 6),
    )


def goal_layout_for(goal: Goal) -> GoalRowLayout:
    """
    Layout a goal must be written in so that it reads back the same.

    Only ISO dates are detectable at index 3, so a goal with a free-text
    date keeps the legacy layout it was read from.

    Examples:
        >>> goal_layout_for(Goal(id="g1", email="a@x.io", date="Monday", goal_text="Read", priority="Low"))
        <GoalRowLayout.LEGACY: 'legacy'>
    """
    if DATE_PATTERN.match(goal.date):
        return GoalRowLayout.CURRENT
    return GoalRowLayout.LEGACY


def goal_to_row(goal: Goal) -> list[str]:
    """
    Encode a goal.

    Goals with an ISO date use the canonical ten-column layout. Any other
    date is written in the nine-column legacy layout, which has no username
    cell.
    """
    if goal_layout_for(goal) is GoalRowLayout.LEGACY:
        return [
            goal.id,
            goal.email,
            goal.date,
            goal.goal_text,
            goal.priority,
            goal.time_estimate or "",
            goal.status.value,
            goal.reflection or "",
            goal.blockers or "",
        ]

    return [
        goal.id,
        goal.email,
        goal.username or "",
        goal.date,
        goal.goal_text,
        goal.priority,
        goal.time_estimate or "",
        goal.status.value,
        goal.reflection or "",
        goal.blockers or "",
    ]


# Users


def row_to_profile(row: Sequence[str]) -> Optional[UserProfile]:
    """Decode a users-sheet row; rows without an email are dropped."""
    email = _cell(row, 0) if row else ""
    if not email:
        return None

    return UserProfile(
        email=email,
        username=_cell(row, 1),
        first_name=_cell(row, 2),
        last_name=_cell(row, 3),
        phase=_to_int(_cell(row, 4)),
        role=_parse_enum(UserRole, _cell(row, 5), UserRole.STUDENT),
        updated_at=parse_timestamp(_cell(row, 6)),
    )


def profile_to_row(profile: UserProfile) -> list[str]:
    """Encode a profile in the canonical seven-column layout."""
    return [
        profile.email,
        profile.username,
        profile.first_name or "",
        profile.last_name or "",
        str(profile.phase),
        profile.role.value,
        format_timestamp(profile.updated_at),
    ]


# Weekly summaries


def row_to_summary(row: Sequence[str]) -> Optional[WeeklySummary]:
    """Decode a weekly-summary row; numeric cells that do not parse read as 0."""
    email = _cell(row, 0) if row else ""
    if not email:
        return None

    return WeeklySummary(
        email=email,
        username=_cell(row, 1),
        week_start=_cell(row, 2),
        week_end=_cell(row, 3),
        total=_to_int(_cell(row, 4)),
        completed=_to_int(_cell(row, 5)),
        partial=_to_int(_cell(row, 6)),
        missed=_to_int(_cell(row, 7)),
        completion_rate=_cell(row, 8),
        performance_status=_parse_enum(
            PerformanceStatus,
            _cell(row, 9),
            PerformanceStatus.NEEDS_IMPROVEMENT,
        ),
        ai_feedback=_cell(row, 10),
        final_remarks=_cell(row, 11),
        recorded_at=parse_timestamp(_cell(row, 12)),
    )


def summary_to_row(summary: WeeklySummary) -> list[str]:
    """Encode a summary in the canonical thirteen-column layout."""
    return [
        summary.email,
        summary.username or "",
        summary.week_start,
        summary.week_end,
        str(summary.total),
        str(summary.completed),
        str(summary.partial),
        str(summary.missed),
        summary.completion_rate,
        summary.performance_status.value,
        summary.ai_feedback or "",
        summary.final_remarks or "",
        format_timestamp(summary.recorded_at),
    ]
