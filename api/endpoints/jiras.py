"""
Task and daily log API endpoints
"""
from typing import Dict, Any
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import get_current_user
from models.jira import DEPLOY_DATE_FIELDS, DailyLog, Jira
from models.master_data import LogOption, Project, Service
from models.schemas import (
    DailyLogCreate,
    DailyLogUpdate,
    DeployRequest,
    JiraCreate,
    JiraStatusUpdate,
    JiraUpdate,
)
from models.team import User
from services.reporting import team_names_by_user
from utils.logging import get_logger
from utils.serializers import jira_to_dict, log_to_dict, service_detail_to_dict, service_to_dict, user_to_dict

logger = get_logger(__name__)
router = APIRouter()

SQL_SEPARATOR = "\n\n-- --------------------------\n\n"


def _owned_jira(db: Session, jira_id: UUID, user: User) -> Jira:
    jira = db.query(Jira).filter(Jira.id == jira_id, Jira.user_id == user.id).first()
    if not jira:
        raise HTTPException(status_code=404, detail="Jira not found")
    return jira


def _get_jira(db: Session, jira_id: UUID) -> Jira:
    jira = db.get(Jira, jira_id)
    if not jira:
        raise HTTPException(status_code=404, detail="Jira not found")
    return jira


@router.get("", response_model=Dict[str, Any])
async def list_jiras(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Tasks of the current user with their daily logs"""
    try:
        jiras = db.query(Jira).filter(Jira.user_id == user.id).order_by(Jira.created_at.desc()).all()
        return {"jiras": [jira_to_dict(jira) for jira in jiras]}

    except Exception as e:
        logger.error("Failed to fetch jiras", user_id=str(user.id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to fetch jiras: {str(e)}")


@router.post("", status_code=201, response_model=Dict[str, Any])
async def create_jira(
    payload: JiraCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Create a task owned by the current user"""
    try:
        data = payload.model_dump()
        project = None
        if payload.project_id:
            project = db.get(Project, payload.project_id)
        elif payload.project_name:
            project = db.query(Project).filter(Project.name == payload.project_name).first()
        if project is not None:
            data["project_id"] = project.id
            data["project_name"] = project.name

        jira = Jira(user_id=user.id, **data)
        db.add(jira)
        db.commit()

        logger.info("Jira created", jira_id=str(jira.id), jira_number=jira.jira_number)
        return {"message": "Jira added successfully", "id": str(jira.id)}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Failed to add jira", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to add jira: {str(e)}")


@router.put("/{jira_id}", response_model=Dict[str, Any])
async def update_jira(
    jira_id: UUID,
    payload: JiraUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Update the editable fields of an owned task"""
    try:
        jira = _owned_jira(db, jira_id, user)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(jira, field, value)
        db.commit()
        db.refresh(jira)

        return {"message": "Jira updated successfully", "jira": jira_to_dict(jira)}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Failed to update jira", jira_id=str(jira_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to update jira: {str(e)}")


@router.delete("/{jira_id}", response_model=Dict[str, Any])
async def delete_jira(
    jira_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Delete an owned task and its logs"""
    try:
        jira = _owned_jira(db, jira_id, user)
        db.delete(jira)
        db.commit()

        logger.info("Jira deleted", jira_id=str(jira_id))
        return {"message": "Jira and its logs deleted successfully"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Failed to delete jira", jira_id=str(jira_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to delete jira: {str(e)}")


@router.put("/{jira_id}/status", response_model=Dict[str, Any])
async def update_jira_status(
    jira_id: UUID,
    payload: JiraStatusUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Partial update of status and deployment dates"""
    try:
        jira = _get_jira(db, jira_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(jira, field, value)
        db.commit()
        db.refresh(jira)

        logger.info("Jira status updated", jira_id=str(jira_id), by=user.username)
        return {"message": "Jira updated successfully", "jira": jira_to_dict(jira)}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Failed to update jira status", jira_id=str(jira_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to update jira: {str(e)}")


@router.post("/{jira_id}/logs", status_code=201, response_model=Dict[str, Any])
async def add_daily_log(
    jira_id: UUID,
    payload: DailyLogCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Log hours against a task"""
    try:
        jira = _owned_jira(db, jira_id, user)

        options = []
        if payload.log_options:
            options = db.query(LogOption).filter(LogOption.id.in_(payload.log_options)).all()

        log = DailyLog(
            jira_id=jira.id,
            log_date=payload.log_date,
            task_description=payload.task_description,
            time_spent=payload.time_spent,
            detail=payload.detail or "",
            env_detail=payload.env_detail,
            sql_detail=payload.sql_detail,
            options=options,
        )
        db.add(log)
        db.commit()
        db.refresh(log)

        logger.info("Daily log added", jira_id=str(jira_id), hours=payload.time_spent)
        return {"message": "Log added successfully", "log": log_to_dict(log)}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Failed to add log", jira_id=str(jira_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to add log: {str(e)}")


def _owned_log(db: Session, jira_id: UUID, log_id: UUID, user: User) -> DailyLog:
    _owned_jira(db, jira_id, user)
    log = db.query(DailyLog).filter(DailyLog.id == log_id, DailyLog.jira_id == jira_id).first()
    if not log:
        raise HTTPException(status_code=404, detail="Log not found")
    return log


@router.put("/{jira_id}/logs/{log_id}", response_model=Dict[str, Any])
async def update_daily_log(
    jira_id: UUID,
    log_id: UUID,
    payload: DailyLogUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Update a log; blank text fields are left unchanged"""
    try:
        log = _owned_log(db, jira_id, log_id, user)

        changes = {}
        for field, value in payload.model_dump(exclude_unset=True).items():
            if field == "time_spent":
                if value is not None:
                    changes[field] = value
            elif isinstance(value, str):
                if value.strip():
                    changes[field] = value
            elif value is not None:
                changes[field] = value

        if not changes:
            raise HTTPException(status_code=400, detail="No fields to update")

        for field, value in changes.items():
            setattr(log, field, value)
        db.commit()
        db.refresh(log)

        return {"message": "Log updated successfully", "log": log_to_dict(log)}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Failed to update log", log_id=str(log_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to update log: {str(e)}")


@router.delete("/{jira_id}/logs/{log_id}", response_model=Dict[str, Any])
async def delete_daily_log(
    jira_id: UUID,
    log_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    try:
        log = _owned_log(db, jira_id, log_id, user)
        db.delete(log)
        db.commit()
        return {"message": "Log deleted successfully"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Failed to delete log", log_id=str(log_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to delete log: {str(e)}")


@router.post("/{jira_id}/deploy", response_model=Dict[str, Any])
async def deploy_jira(
    jira_id: UUID,
    payload: DeployRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Record a deployment and return the deployment package data"""
    try:
        jira = _get_jira(db, jira_id)
        service = db.query(Service).filter(Service.name == jira.service_name).first()
        if service is None:
            raise HTTPException(status_code=404, detail="Service data not found")

        env = payload.environment.value
        setattr(jira, DEPLOY_DATE_FIELDS[env], payload.deploy_date)
        db.commit()
        db.refresh(jira)

        env_detail = next((d for d in service.details if d.env.value == env), None)
        scripts = [log.sql_detail for log in jira.daily_logs if log.sql_detail and log.sql_detail.strip()]

        logger.info("Deployment recorded", jira_number=jira.jira_number, environment=env,
                    deploy_date=payload.deploy_date.isoformat())

        return {
            "jira": jira_to_dict(jira),
            "requester": user_to_dict(user),
            "team_name": team_names_by_user(db).get(user.id),
            "environment": env,
            "deploy_date": payload.deploy_date.isoformat(),
            "service": service_to_dict(service),
            "environment_detail": service_detail_to_dict(env_detail) if env_detail else None,
            "has_sql": bool(scripts),
            "sql_script": SQL_SEPARATOR.join(scripts),
        }

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Deployment failed", jira_id=str(jira_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Deployment failed: {str(e)}")
