"""
IT lead rollups across every user and project
"""
from collections import defaultdict
from datetime import date
from typing import Any, Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.jira import DailyLog, Jira
from models.master_data import Project
from models.team import Team, User, UserType
from services.working_days import month_bounds
from utils.logging import get_logger
from utils.serializers import user_to_dict

logger = get_logger(__name__)


def team_names_by_user(db: Session) -> Dict[Any, str]:
    """Map user id -> team name; a user's first active team wins"""
    names = {}
    teams = db.query(Team).filter(Team.is_active.is_(True)).order_by(Team.created_at).all()
    for team in teams:
        for member in team.members:
            names.setdefault(member.id, team.team_name)
    return names


def _logged_rows(db: Session, start: date, end: date):
    return (
        db.query(
            Jira.project_name,
            Project.type,
            User.id,
            User.type,
            func.sum(DailyLog.time_spent),
        )
        .select_from(DailyLog)
        .join(Jira, DailyLog.jira_id == Jira.id)
        .join(User, Jira.user_id == User.id)
        .outerjoin(Project, Project.name == Jira.project_name)
        .filter(DailyLog.log_date >= start, DailyLog.log_date <= end)
        .group_by(Jira.project_name, Project.type, User.id, User.type)
        .all()
    )


def it_lead_summary(db: Session, year: int, month: int) -> Dict[str, Any]:
    """Hours per project (grouped by project type) and per user for a month"""
    start, end = month_bounds(year, month)
    rows = _logged_rows(db, start, end)

    projects: Dict[str, Dict[str, Dict[str, Any]]] = defaultdict(dict)
    user_hours: Dict[Any, float] = defaultdict(float)

    for project_name, project_type, user_id, user_type, hours in rows:
        hours = float(hours or 0)
        group = projects[project_type or "Other"]
        project = group.setdefault(project_name, {
            "name": project_name,
            "total_hours": 0.0,
            "core_hours": 0.0,
            "non_core_hours": 0.0,
        })
        project["total_hours"] += hours
        if user_type == UserType.CORE.value:
            project["core_hours"] += hours
        elif user_type == UserType.NON_CORE.value:
            project["non_core_hours"] += hours
        user_hours[user_id] += hours

    team_names = team_names_by_user(db)
    individuals = []
    for user in db.query(User).all():
        data = user_to_dict(user)
        data["team_name"] = team_names.get(user.id)
        individuals.append({"user": data, "total_hours": user_hours.get(user.id, 0.0)})

    logger.info("Built IT lead summary", year=year, month=month, users=len(individuals))

    return {
        "year": year,
        "month": month,
        "project_summary": [
            {"type": project_type, "projects": list(items.values())}
            for project_type, items in sorted(projects.items())
        ],
        "individual_summary": sorted(individuals, key=lambda item: item["user"]["username"]),
    }


def yearly_summary(db: Session, year: int) -> List[Dict[str, Any]]:
    """Core and non-core hours for each month of ``year``, zero-filled"""
    rows = (
        db.query(DailyLog.log_date, User.type, DailyLog.time_spent)
        .join(Jira, DailyLog.jira_id == Jira.id)
        .join(User, Jira.user_id == User.id)
        .filter(DailyLog.log_date >= date(year, 1, 1), DailyLog.log_date <= date(year, 12, 31))
        .all()
    )

    months = [{"month": number, "core_hours": 0.0, "non_core_hours": 0.0} for number in range(1, 13)]
    for log_date, user_type, hours in rows:
        bucket = months[log_date.month - 1]
        if user_type == UserType.CORE.value:
            bucket["core_hours"] += float(hours or 0)
        elif user_type == UserType.NON_CORE.value:
            bucket["non_core_hours"] += float(hours or 0)

    return months
