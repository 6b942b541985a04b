"""
Public holiday endpoint
"""
from typing import Dict, Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from connectors.errors import ExternalServiceError
from services.holidays import HolidayService, get_holiday_service
from utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=Dict[str, Any])
async def get_holidays(
    year: Optional[int] = Query(None, ge=1900, le=2999),
    service: HolidayService = Depends(get_holiday_service)
):
    """Financial-institution holidays for a year"""
    if year is None:
        raise HTTPException(status_code=400, detail="Year query parameter is required")

    if not service.connector.configured:
        logger.error("BOT_API_KEY is not set")
        raise HTTPException(status_code=500, detail="API configuration error")

    try:
        holidays = await service.get_holidays(year)
        return {"holidays": holidays, "success": True}

    except ExternalServiceError as e:
        logger.error("Failed to fetch holidays", year=year, error=str(e))
        raise HTTPException(status_code=502, detail=f"Failed to fetch holiday data: {str(e)}")
