"""Goal router - API endpoints for daily goals."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from goal_tracker.database import get_backend
from goal_tracker.errors import NotFoundError
from goal_tracker.models.goal import Goal, GoalCreate, GoalUpdate
from goal_tracker.repositories.goals import GoalsRepository
from goal_tracker.routers.auth import CurrentUser, get_current_user


router = APIRouter(prefix="/goals", tags=["goals"])


@router.post("", response_model=Goal, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal: GoalCreate,
    user: CurrentUser = Depends(get_current_user),
    backend=Depends(get_backend),
):
    """
    Create a new goal.

    - Owner is the authenticated user
    - Username is taken from the user's profile when one exists
    - Starts as Not Completed unless a status is given
    """
    repository = GoalsRepository(backend)
    return await repository.add(user.email, goal, username=user.username)


@router.get("", response_model=list[Goal])
async def list_goals(
    date: Optional[str] = Query(None, description="Filter by date (YYYY-MM-DD)"),
    student_email: Optional[str] = Query(None, description="Teachers/admins: filter by student email"),
    student_username: Optional[str] = Query(None, description="Teachers/admins: filter by student username"),
    user: CurrentUser = Depends(get_current_user),
    backend=Depends(get_backend),
):
    """
    List goals.

    - Students see their own goals
    - Teachers and admins see every goal, optionally filtered by student
    """
    repository = GoalsRepository(backend)
    if user.is_staff:
        return await repository.get_all(
            email=student_email,
            username=student_username,
            on_date=date,
        )
    return await repository.get(user.email, username=user.username, on_date=date)


@router.patch("/{goal_id}", response_model=Goal)
async def update_goal(
    goal_id: str,
    goal_update: GoalUpdate,
    user: CurrentUser = Depends(get_current_user),
    backend=Depends(get_backend),
):
    """
    Update a goal's status, reflection, blockers or text.

    - Returns 404 if goal not found
    """
    repository = GoalsRepository(backend)
    try:
        return await repository.update(goal_id, goal_update)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
