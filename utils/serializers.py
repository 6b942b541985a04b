"""
Conversion of ORM objects into JSON-ready dictionaries
"""
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional


def _iso(value: Optional[Any]) -> Optional[str]:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _id(value: Optional[Any]) -> Optional[str]:
    return str(value) if value is not None else None


def log_option_to_dict(option) -> Dict[str, Any]:
    return {"id": _id(option.id), "name": option.name, "color_code": option.color_code}


def log_to_dict(log, jira_id: Optional[Any] = None) -> Dict[str, Any]:
    return {
        "id": _id(log.id),
        "jira_id": _id(jira_id if jira_id is not None else log.jira_id),
        "log_date": _iso(log.log_date),
        "task_description": log.task_description,
        "time_spent": float(log.time_spent or 0),
        "detail": log.detail,
        "env_detail": log.env_detail,
        "sql_detail": log.sql_detail,
        "options": [log_option_to_dict(o) for o in (getattr(log, "options", None) or [])],
    }


def jira_to_dict(jira, logs: Optional[Iterable] = None) -> Dict[str, Any]:
    """Serialize a task; ``logs`` narrows the embedded daily logs"""
    daily_logs = list(jira.daily_logs if logs is None else logs)
    return {
        "id": _id(jira.id),
        "user_id": _id(jira.user_id),
        "project_id": _id(jira.project_id),
        "project_name": jira.project_name,
        "jira_number": jira.jira_number,
        "description": jira.description,
        "service_name": jira.service_name,
        "assignee": jira.assignee,
        "effort_estimation": jira.effort_estimation,
        "jira_status": jira.jira_status,
        "actual_status": jira.actual_status,
        "related_jira": jira.related_jira,
        "environment": jira.environment,
        "env_detail": jira.env_detail,
        "sql_detail": jira.sql_detail,
        "due_date": _iso(jira.due_date),
        "deploy_sit_date": _iso(jira.deploy_sit_date),
        "deploy_uat_date": _iso(jira.deploy_uat_date),
        "deploy_preprod_date": _iso(jira.deploy_preprod_date),
        "deploy_prod_date": _iso(jira.deploy_prod_date),
        "created_at": _iso(jira.created_at),
        "updated_at": _iso(jira.updated_at),
        "total_time_spent": sum(float(log.time_spent or 0) for log in daily_logs),
        "daily_logs": [log_to_dict(log, jira.id) for log in daily_logs],
    }


def user_to_dict(user, include_roles: bool = False) -> Dict[str, Any]:
    data = {
        "id": _id(user.id),
        "username": user.username,
        "email": user.email,
        "name": user.name,
        "type": user.type,
    }
    if include_roles:
        data["roles"] = list(user.roles or [])
        data["created_at"] = _iso(user.created_at)
    return data


def member_to_dict(user) -> Dict[str, Any]:
    return {"id": _id(user.id), "username": user.username, "email": user.email}


def team_to_dict(team) -> Dict[str, Any]:
    return {
        "id": _id(team.id),
        "team_lead_id": _id(team.team_lead_id),
        "team_name": team.team_name,
        "is_active": team.is_active,
        "member_ids": [_id(member_id) for member_id in team.member_ids],
        "members": [member_to_dict(member) for member in team.members],
        "created_at": _iso(team.created_at),
        "updated_at": _iso(team.updated_at),
    }


def project_to_dict(project) -> Dict[str, Any]:
    return {
        "id": _id(project.id),
        "name": project.name,
        "type": project.type,
        "created_at": _iso(project.created_at),
    }


def service_detail_to_dict(detail) -> Dict[str, Any]:
    env = detail.env.value if hasattr(detail.env, "value") else detail.env
    return {
        "id": _id(detail.id),
        "service_id": _id(detail.service_id),
        "env": env,
        "url": detail.url,
        "database1": detail.database1,
        "database2": detail.database2,
        "database3": detail.database3,
        "server": detail.server,
        "soap": detail.soap,
    }


def service_to_dict(service, include_details: bool = False) -> Dict[str, Any]:
    data = {
        "id": _id(service.id),
        "name": service.name,
        "repository": service.repository,
        "deploy_by": service.deploy_by,
    }
    if include_details:
        data["details"] = [service_detail_to_dict(d) for d in service.details]
    return data
