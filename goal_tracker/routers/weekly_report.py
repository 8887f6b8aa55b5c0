"""Weekly report router - API endpoints for weekly stats and summaries."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from goal_tracker.database import get_backend
from goal_tracker.models.weekly_report import WeeklyReport
from goal_tracker.models.weekly_summary import WeeklySummary
from goal_tracker.repositories.weekly_summaries import WeeklySummaryRepository
from goal_tracker.routers.auth import CurrentUser, get_current_user
from goal_tracker.services.weekly_report_service import WeeklyReportService


router = APIRouter(prefix="/weekly-report", tags=["weekly-report"])


@router.get("", response_model=WeeklyReport)
async def get_weekly_report(
    save: bool = Query(False, description="Store the summary for this week"),
    ai_feedback: Optional[str] = Query(None, max_length=500, description="Feedback to store with the summary"),
    user: CurrentUser = Depends(get_current_user),
    backend=Depends(get_backend),
):
    """
    Get the caller's stats for the past week.

    - Counts goals dated from 7 days ago through today
    - With save=true, stores the weekly summary when there are goals
    """
    service = WeeklyReportService(backend)
    return await service.build_report(
        user.email,
        username=user.username,
        save=save,
        ai_feedback=ai_feedback,
    )


@router.get("/all", response_model=list[WeeklySummary])
async def list_weekly_reports(
    user: CurrentUser = Depends(get_current_user),
    backend=Depends(get_backend),
):
    """
    List every stored weekly summary.

    - Teachers and admins only (403 otherwise)
    """
    if not user.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Teachers only.",
        )

    repository = WeeklySummaryRepository(backend)
    return await repository.list_all()
