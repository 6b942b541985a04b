"""
Personal dashboard endpoints computed over the current user's tasks
"""
from datetime import date
from typing import Dict, Any, List, Optional, Set
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from config import settings
from core.database import get_db
from core.security import get_current_user
from models.jira import Jira
from models.team import User
from services import analytics
from services.grouping import VALID_VIEWS, group_jiras
from services.holidays import HolidayService, get_holiday_service
from utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


def _user_jiras(db: Session, user: User) -> List[Jira]:
    return db.query(Jira).filter(Jira.user_id == user.id).all()


async def _holidays_for(holidays: HolidayService, jiras: List[Jira], today: date) -> Set[date]:
    """Holiday dates for every year the tasks and their logs touch"""
    years = {today.year}
    for jira in jiras:
        years.update(log.log_date.year for log in jira.daily_logs)
        years.update(value.year for value in (jira.due_date, jira.created_at) if value is not None)

    dates: Set[date] = set()
    for year in sorted(years):
        dates |= await holidays.holiday_dates(year)
    return dates


@router.get("/stats", response_model=Dict[str, Any])
async def get_stats(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Headline task and hour counters"""
    try:
        return analytics.jira_stats(_user_jiras(db, user), date.today())

    except Exception as e:
        logger.error("Failed to compute stats", user_id=str(user.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to compute stats: {str(e)}")


@router.get("/grouped", response_model=Dict[str, Any])
async def get_grouped(
    view: str = Query("project", description="project, service, environment or jira"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    holidays: HolidayService = Depends(get_holiday_service)
):
    """Logs grouped by month and the requested dimension"""
    if view not in VALID_VIEWS:
        raise HTTPException(status_code=400, detail=f"Invalid view, expected one of {VALID_VIEWS}")

    try:
        jiras = _user_jiras(db, user)
        return group_jiras(jiras, view, await _holidays_for(holidays, jiras, date.today()))

    except Exception as e:
        logger.error("Failed to group jiras", view=view, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to group jiras: {str(e)}")


@router.get("/burndown", response_model=Dict[str, Any])
async def get_burndown(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    try:
        return analytics.burndown(_user_jiras(db, user), date.today())

    except Exception as e:
        logger.error("Failed to compute burndown", user_id=str(user.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to compute burndown: {str(e)}")


@router.get("/workload", response_model=Dict[str, Any])
async def get_workload(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    try:
        return analytics.workload_balance(_user_jiras(db, user), date.today())

    except Exception as e:
        logger.error("Failed to compute workload balance", user_id=str(user.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to compute workload balance: {str(e)}")


@router.get("/productivity", response_model=Dict[str, Any])
async def get_productivity(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    holidays: HolidayService = Depends(get_holiday_service)
):
    try:
        today = date.today()
        return analytics.productivity_insights(
            _user_jiras(db, user), today, await holidays.holiday_dates(today.year)
        )

    except Exception as e:
        logger.error("Failed to compute productivity", user_id=str(user.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to compute productivity: {str(e)}")


@router.get("/monthly-summary", response_model=Dict[str, Any])
async def get_monthly_summary(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    try:
        return analytics.monthly_summary(_user_jiras(db, user), date.today())

    except Exception as e:
        logger.error("Failed to compute monthly summary", user_id=str(user.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to compute monthly summary: {str(e)}")


@router.get("/logging-tracker", response_model=Dict[str, Any])
async def get_logging_tracker(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    holidays: HolidayService = Depends(get_holiday_service)
):
    try:
        today = date.today()
        return analytics.logging_tracker(
            _user_jiras(db, user), today, await holidays.holiday_dates(today.year)
        )

    except Exception as e:
        logger.error("Failed to compute logging tracker", user_id=str(user.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to compute logging tracker: {str(e)}")


@router.get("/due-soon", response_model=List[Dict[str, Any]])
async def get_due_soon(
    days: int = Query(settings.workload.due_soon_days, ge=0, le=30),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """In-progress tasks due within ``days`` days"""
    try:
        return analytics.due_soon(_user_jiras(db, user), date.today(), days)

    except Exception as e:
        logger.error("Failed to compute due-soon tasks", user_id=str(user.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to compute due-soon tasks: {str(e)}")


@router.get("/deployment-history", response_model=Dict[str, Any])
async def get_deployment_history(
    days: Optional[int] = Query(30, ge=1, description="Look-back window in days"),
    all_time: bool = Query(False, alias="all"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Past SIT/UAT/PREPROD/PROD deployments, newest first"""
    try:
        return analytics.deployment_history(_user_jiras(db, user), date.today(), None if all_time else days)

    except Exception as e:
        logger.error("Failed to build deployment history", user_id=str(user.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to build deployment history: {str(e)}")


@router.get("/upcoming-deployments", response_model=Dict[str, Any])
async def get_upcoming_deployments(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Deployments scheduled in the next two weeks"""
    try:
        return analytics.upcoming_deployments(_user_jiras(db, user), date.today())

    except Exception as e:
        logger.error("Failed to build deployment schedule", user_id=str(user.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to build deployment schedule: {str(e)}")
