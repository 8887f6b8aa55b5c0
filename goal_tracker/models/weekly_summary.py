"""Weekly summary model definitions."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


DEFAULT_AI_FEEDBACK = "Improve consistency"


class PerformanceStatus(str, Enum):
    """Performance band derived from the weekly completion rate."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    NEEDS_IMPROVEMENT = "Needs Improvement"


FINAL_REMARKS = {
    PerformanceStatus.EXCELLENT: "Outstanding week. Keep up the consistency.",
    PerformanceStatus.GOOD: "Solid progress. A few more completed goals will get you to excellent.",
    PerformanceStatus.NEEDS_IMPROVEMENT: "Plan fewer goals and focus on finishing them every day.",
}


def performance_for_rate(rate: float) -> PerformanceStatus:
    """
    Map a completion percentage to its performance band.

    Examples:
        >>> performance_for_rate(80.0)
        <PerformanceStatus.EXCELLENT: 'Excellent'>
        >>> performance_for_rate(59.9)
        <PerformanceStatus.NEEDS_IMPROVEMENT: 'Needs Improvement'>
    """
    if rate >= 80:
        return PerformanceStatus.EXCELLENT
    if rate >= 60:
        return PerformanceStatus.GOOD
    return PerformanceStatus.NEEDS_IMPROVEMENT


class WeeklySummaryBase(BaseModel):
    """Base summary fields."""

    email: str
    username: str = ""
    week_start: str
    week_end: str
    total: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    partial: int = Field(default=0, ge=0)
    missed: int = Field(default=0, ge=0)
    ai_feedback: str = DEFAULT_AI_FEEDBACK


class WeeklySummaryCreate(WeeklySummaryBase):
    """Summary input; derived fields are computed on save."""

    pass


class WeeklySummary(WeeklySummaryBase):
    """Summary as stored in the weekly summaries sheet."""

    total: int = 0
    completed: int = 0
    partial: int = 0
    missed: int = 0
    completion_rate: str = "0.0%"
    performance_status: PerformanceStatus = PerformanceStatus.NEEDS_IMPROVEMENT
    final_remarks: str = ""
    recorded_at: Optional[datetime] = None
