"""
Operational endpoints
"""
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from connectors.errors import ExternalServiceError
from connectors.jira import JiraConnector, get_jira_connector
from core.database import get_db
from core.scheduler import get_scheduler_status, trigger_status_sync_now
from core.security import require_roles
from models.team import Role, User
from utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/scheduler", response_model=Dict[str, Any])
async def scheduler_status(user: User = Depends(require_roles(Role.ADMIN.value, Role.IT_LEAD.value))):
    """Scheduled jobs and their next run times"""
    try:
        return get_scheduler_status()

    except Exception as e:
        logger.error("Failed to get scheduler status", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to get scheduler status: {str(e)}")


@router.post("/scheduler/status-sync", response_model=Dict[str, Any])
async def run_status_sync(
    db: Session = Depends(get_db),
    connector: JiraConnector = Depends(get_jira_connector),
    user: User = Depends(require_roles(Role.ADMIN.value))
):
    """Run the JIRA status sync now instead of waiting for its schedule"""
    try:
        updated = await trigger_status_sync_now(db, connector)
        return {"message": "Status sync completed", "updated": updated}

    except ExternalServiceError as e:
        logger.error("Manual status sync failed", by=user.username, error=str(e))
        raise HTTPException(status_code=502, detail=f"Failed to fetch from Jira API: {str(e)}")
    except Exception as e:
        logger.error("Manual status sync failed", by=user.username, error=str(e))
        raise HTTPException(status_code=500, detail=f"Status sync failed: {str(e)}")
