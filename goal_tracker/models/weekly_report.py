"""Weekly report model definitions."""
from pydantic import BaseModel


class WeeklyStats(BaseModel):
    """Goal counts and percentages for one user's week."""

    total_goals: int = 0
    completed: int = 0
    partially_completed: int = 0
    not_completed: int = 0
    completed_percentage: float = 0.0
    partial_percentage: float = 0.0
    missed_percentage: float = 0.0


class WeeklyReport(WeeklyStats):
    """Stats plus the week they cover."""

    week_start: str
    week_end: str
    saved: bool = False
