"""Goal model definitions."""
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class GoalStatus(str, Enum):
    """Completion state of a daily goal, stored as the cell text."""

    NOT_COMPLETED = "Not Completed"
    PARTIALLY_COMPLETED = "Partially Completed"
    COMPLETED = "Completed"


class GoalBase(BaseModel):
    """Base goal fields."""

    goal_text: str
    priority: str
    time_estimate: str = ""
    status: GoalStatus = GoalStatus.NOT_COMPLETED


class GoalCreate(GoalBase):
    """Goal creation model."""

    date: date
    goal_text: str = Field(min_length=1)
    priority: str = Field(min_length=1)


class GoalUpdate(BaseModel):
    """Goal update model - all fields optional."""

    goal_text: Optional[str] = None
    priority: Optional[str] = None
    time_estimate: Optional[str] = None
    status: Optional[GoalStatus] = None
    reflection: Optional[str] = None
    blockers: Optional[str] = None


class Goal(GoalBase):
    """Full goal model as stored in the goals sheet."""

    id: str
    email: str
    username: str = ""
    # Kept as the raw cell text; rows written before dates were validated may hold anything.
    date: str
    reflection: str = ""
    blockers: str = ""
