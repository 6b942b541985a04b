"""
IT lead summary endpoints
"""
from datetime import MAXYEAR, MINYEAR, date
from typing import Dict, Any, List, Optional, Tuple
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import require_roles
from models.alerts import Alert
from models.team import Role, User
from services.alerts import it_lead_alerts, resource_heatmap
from services.analytics import month_capacity, team_member_stats
from services.holidays import HolidayService, get_holiday_service
from services.reporting import it_lead_summary, yearly_summary
from utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()

it_lead = require_roles(Role.IT_LEAD.value)


def _valid_year(year: Optional[int]) -> bool:
    return year is not None and MINYEAR <= year <= MAXYEAR


def _period(year: Optional[int], month: Optional[int], default_current: bool = False) -> Tuple[int, int]:
    if default_current:
        today = date.today()
        year = year if year is not None else today.year
        month = month if month is not None else today.month
    if not _valid_year(year) or month is None or not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="Invalid year or month")
    return year, month


@router.get("/it-lead", response_model=Dict[str, Any])
async def get_it_lead_summary(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(it_lead)
):
    """Project and individual hours for a month"""
    year, month = _period(year, month)
    try:
        return it_lead_summary(db, year, month)

    except Exception as e:
        logger.error("Failed to fetch IT lead summary", year=year, month=month, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to fetch summary data: {str(e)}")


@router.get("/it-lead/yearly", response_model=List[Dict[str, Any]])
async def get_yearly_summary(
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(it_lead)
):
    """Core and non-core hours for each month of a year"""
    if not _valid_year(year):
        raise HTTPException(status_code=400, detail="Invalid year")
    try:
        return yearly_summary(db, year)

    except Exception as e:
        logger.error("Failed to fetch yearly summary", year=year, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to fetch yearly summary data: {str(e)}")


@router.get("/it-lead/alerts", response_model=List[Alert])
async def get_it_lead_alerts(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(it_lead),
    holidays: HolidayService = Depends(get_holiday_service)
):
    """Cross-team alerts; defaults to the current month"""
    year, month = _period(year, month, default_current=True)
    try:
        capacity = month_capacity(year, month, await holidays.holiday_dates(year))
        return it_lead_alerts(it_lead_summary(db, year, month), capacity)

    except Exception as e:
        logger.error("Failed to build IT lead alerts", year=year, month=month, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to build alerts: {str(e)}")


@router.get("/it-lead/heatmap", response_model=List[Dict[str, Any]])
async def get_resource_heatmap(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(it_lead),
    holidays: HolidayService = Depends(get_holiday_service)
):
    """Team utilization heatmap; defaults to the current month"""
    year, month = _period(year, month, default_current=True)
    try:
        capacity = month_capacity(year, month, await holidays.holiday_dates(year))
        return resource_heatmap(it_lead_summary(db, year, month), capacity)

    except Exception as e:
        logger.error("Failed to build resource heatmap", year=year, month=month, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to build heatmap: {str(e)}")


@router.get("/it-lead/member-stats", response_model=Dict[str, Any])
async def get_member_stats(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(it_lead),
    holidays: HolidayService = Depends(get_holiday_service)
):
    """Core/non-core headcount, hours and utilization bands for a month"""
    year, month = _period(year, month, default_current=True)
    try:
        summary = it_lead_summary(db, year, month)
        members = [
            {
                "username": item["user"]["username"],
                "type": item["user"]["type"],
                "total_hours": item["total_hours"],
            }
            for item in summary["individual_summary"]
        ]
        capacity = month_capacity(year, month, await holidays.holiday_dates(year))
        return team_member_stats(members, capacity)

    except Exception as e:
        logger.error("Failed to build member stats", year=year, month=month, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to build member stats: {str(e)}")
