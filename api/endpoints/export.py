"""
Work log export endpoint
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from connectors.errors import ExternalServiceError
from connectors.jira import JiraConnector, get_jira_connector
from core.database import get_db
from core.security import get_current_user
from models.jira import Jira
from models.team import User
from services.export import XLSX_MEDIA_TYPE, build_work_log_workbook, export_filename
from utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/excel")
async def export_excel(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    connector: JiraConnector = Depends(get_jira_connector),
    user: User = Depends(get_current_user)
):
    """Download the current user's work log as an Excel workbook"""
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    try:
        jiras = db.query(Jira).filter(Jira.user_id == user.id).order_by(Jira.created_at).all()

        try:
            live_statuses = await connector.fetch_statuses(j.jira_number for j in jiras)
        except ExternalServiceError as e:
            logger.warning("Live JIRA statuses unavailable, using stored statuses", error=str(e))
            live_statuses = {}

        content = build_work_log_workbook(jiras, start_date, end_date, live_statuses)
        filename = export_filename()

        logger.info("Work log exported", user_id=str(user.id), jiras=len(jiras), filename=filename)
        return Response(
            content=content,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'}
        )

    except Exception as e:
        logger.error("Failed to export to Excel", user_id=str(user.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to export to Excel: {str(e)}")
