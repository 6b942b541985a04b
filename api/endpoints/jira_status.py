"""
Live JIRA lookups
"""
from typing import Dict, Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from connectors.errors import ExternalServiceError
from connectors.jira import JiraConnector, get_jira_connector
from core.security import get_current_user
from models.team import User
from utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/jira-status", response_model=Dict[str, Any])
async def get_jira_statuses(
    jira_numbers: Optional[str] = Query(None, alias="jiraNumbers", description="Comma-separated issue keys"),
    connector: JiraConnector = Depends(get_jira_connector),
    user: User = Depends(get_current_user)
):
    """Current JIRA status for each requested key"""
    if not jira_numbers:
        raise HTTPException(status_code=400, detail="Missing jiraNumbers parameter")

    try:
        statuses = await connector.fetch_statuses(jira_numbers.split(","))
        return {"statuses": statuses}

    except ExternalServiceError as e:
        raise HTTPException(status_code=502, detail=f"Failed to fetch from Jira API: {str(e)}")
    except Exception as e:
        logger.error("Failed to fetch jira statuses", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to fetch jira statuses: {str(e)}")


@router.get("/my-jiras", response_model=List[Dict[str, Any]])
async def get_assigned_jiras(
    email: Optional[str] = Query(None, description="Assignee email"),
    connector: JiraConnector = Depends(get_jira_connector),
    user: User = Depends(get_current_user)
):
    """Issues assigned to an email address in JIRA"""
    if not email:
        raise HTTPException(status_code=400, detail="User email is required")

    try:
        return await connector.fetch_assigned_issues(email)

    except ExternalServiceError as e:
        raise HTTPException(status_code=502, detail=f"Failed to fetch Jira data: {str(e)}")
    except Exception as e:
        logger.error("Failed to fetch assigned jiras", email=email, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to fetch Jira data: {str(e)}")
