"""
Team lead endpoints: team membership, member tasks and team analytics
"""
from datetime import date
from typing import Dict, Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import require_roles
from models.alerts import Alert
from models.jira import Jira
from models.schemas import TeamMembersPayload, TeamPayload
from models.team import Role, Team, User
from services.alerts import team_performance_alerts
from services.analytics import velocity
from services.holidays import HolidayService, get_holiday_service
from services.team_summary import team_summary
from utils.logging import get_logger
from utils.serializers import jira_to_dict, member_to_dict, team_to_dict

logger = get_logger(__name__)
router = APIRouter()

team_lead = require_roles(Role.TEAM_LEAD.value)


def active_team(db: Session, lead: User) -> Optional[Team]:
    return (
        db.query(Team)
        .filter(Team.team_lead_id == lead.id, Team.is_active.is_(True))
        .first()
    )


def load_team_data(db: Session, team: Optional[Team], open_only: bool = False) -> List[Dict[str, Any]]:
    """``[{"user": member, "jiras": [...]}]`` for every team member"""
    if team is None:
        return []

    entries = []
    for member in team.members:
        query = db.query(Jira).filter(Jira.user_id == member.id)
        if open_only:
            query = query.filter(or_(
                Jira.actual_status.is_(None),
                func.lower(Jira.actual_status).notin_(("done", "closed"))
            ))
        entries.append({"user": member, "jiras": query.all()})
    return entries


def _available_members(db: Session, lead: User) -> List[Dict[str, Any]]:
    users = db.query(User).filter(User.id != lead.id).order_by(User.username).all()
    return [member_to_dict(u) for u in users if u.has_role(Role.DEVELOPER.value)]


@router.get("", response_model=Dict[str, Any])
async def get_team(
    db: Session = Depends(get_db),
    lead: User = Depends(team_lead)
):
    """The lead's active team and the developers that can join it"""
    try:
        team = active_team(db, lead)
        return {
            "team": team_to_dict(team) if team else None,
            "available_members": _available_members(db, lead),
        }

    except Exception as e:
        logger.error("Failed to fetch team", lead_id=str(lead.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to fetch team: {str(e)}")


@router.post("", response_model=Dict[str, Any])
async def save_team(
    payload: TeamPayload,
    db: Session = Depends(get_db),
    lead: User = Depends(team_lead)
):
    """Create or replace the lead's team"""
    if not payload.team_name or payload.member_ids is None:
        raise HTTPException(status_code=400, detail="Invalid data")

    try:
        member_ids = list(dict.fromkeys(payload.member_ids))
        members = db.query(User).filter(User.id.in_(member_ids)).all() if member_ids else []
        if len(members) != len(member_ids):
            raise HTTPException(status_code=400, detail="Some member IDs are invalid")

        team = active_team(db, lead)
        if team is None:
            team = Team(team_lead_id=lead.id, is_active=True)
            db.add(team)
        team.team_name = payload.team_name
        team.members = members
        db.commit()
        db.refresh(team)

        logger.info("Team saved", team_name=team.team_name, members=len(members))
        return {"team": team_to_dict(team)}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Failed to save team", lead_id=str(lead.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to save team: {str(e)}")


@router.delete("", response_model=Dict[str, Any])
async def remove_team_members(
    payload: TeamMembersPayload,
    db: Session = Depends(get_db),
    lead: User = Depends(team_lead)
):
    """Remove members from the lead's team"""
    if payload.member_ids is None:
        raise HTTPException(status_code=400, detail="Invalid memberIds")

    try:
        team = active_team(db, lead)
        if team is None:
            raise HTTPException(status_code=404, detail="Team not found")

        removed = set(payload.member_ids)
        team.members = [m for m in team.members if m.id not in removed]
        db.commit()
        db.refresh(team)

        return {"team": team_to_dict(team)}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Failed to update team", lead_id=str(lead.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to update team: {str(e)}")


@router.get("/jiras", response_model=Dict[str, Any])
async def get_team_jiras(
    db: Session = Depends(get_db),
    lead: User = Depends(team_lead)
):
    """Open tasks of every member keyed by member id"""
    try:
        team_data = load_team_data(db, active_team(db, lead), open_only=True)
        return {
            str(entry["user"].id): {
                "member_info": member_to_dict(entry["user"]),
                "jiras": [jira_to_dict(j) for j in entry["jiras"]],
            }
            for entry in team_data
        }

    except Exception as e:
        logger.error("Failed to fetch team jiras", lead_id=str(lead.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to fetch team jiras: {str(e)}")


@router.get("/summary", response_model=Dict[str, Any])
async def get_team_summary(
    db: Session = Depends(get_db),
    lead: User = Depends(team_lead),
    holidays: HolidayService = Depends(get_holiday_service)
):
    """Current-month team summary"""
    try:
        today = date.today()
        team = active_team(db, lead)
        summary = team_summary(load_team_data(db, team), today, await holidays.holiday_dates(today.year))
        summary["team_name"] = team.team_name if team else None
        return summary

    except Exception as e:
        logger.error("Failed to build team summary", lead_id=str(lead.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to build team summary: {str(e)}")


@router.get("/alerts", response_model=List[Alert])
async def get_team_alerts(
    db: Session = Depends(get_db),
    lead: User = Depends(team_lead),
    holidays: HolidayService = Depends(get_holiday_service)
):
    """Performance alerts for the lead's team"""
    try:
        today = date.today()
        team_data = load_team_data(db, active_team(db, lead))
        return team_performance_alerts(team_data, today, await holidays.holiday_dates(today.year))

    except Exception as e:
        logger.error("Failed to build team alerts", lead_id=str(lead.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to build team alerts: {str(e)}")


@router.get("/velocity", response_model=Dict[str, Any])
async def get_team_velocity(
    db: Session = Depends(get_db),
    lead: User = Depends(team_lead)
):
    """This week's tasks and hours per member"""
    try:
        return velocity(load_team_data(db, active_team(db, lead)), date.today())

    except Exception as e:
        logger.error("Failed to build team velocity", lead_id=str(lead.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to build team velocity: {str(e)}")
