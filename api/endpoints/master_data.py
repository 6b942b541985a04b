"""
Master data endpoints: projects, services, service details and log options
"""
from typing import Dict, Any, List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import get_current_user
from models.master_data import LogOption, Project, Service, ServiceDetail
from models.schemas import LogOptionPayload, ProjectPayload, ServiceDetailPayload, ServicePayload
from utils.logging import get_logger
from utils.serializers import log_option_to_dict, project_to_dict, service_detail_to_dict, service_to_dict

logger = get_logger(__name__)
router = APIRouter(dependencies=[Depends(get_current_user)])


# Projects

@router.get("/projects", response_model=List[Dict[str, Any]])
async def list_projects(db: Session = Depends(get_db)):
    try:
        return [project_to_dict(p) for p in db.query(Project).order_by(Project.name).all()]

    except Exception as e:
        logger.error("Failed to fetch projects", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to fetch projects: {str(e)}")


@router.post("/projects", status_code=201, response_model=Dict[str, Any])
async def create_project(payload: ProjectPayload, db: Session = Depends(get_db)):
    """Create a project; name and type are required"""
    if not payload.name or not payload.type:
        raise HTTPException(status_code=400, detail="Name and type are required")

    try:
        project = Project(name=payload.name, type=payload.type)
        db.add(project)
        db.commit()
        db.refresh(project)
        return project_to_dict(project)

    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Project name already exists")
    except Exception as e:
        db.rollback()
        logger.error("Failed to create project", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to create project: {str(e)}")


@router.put("/projects/{project_id}", response_model=Dict[str, Any])
async def update_project(project_id: UUID, payload: ProjectPayload, db: Session = Depends(get_db)):
    if not payload.name or not payload.type:
        raise HTTPException(status_code=400, detail="Name and type are required")

    try:
        project = db.get(Project, project_id)
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")

        project.name = payload.name
        project.type = payload.type
        db.commit()
        db.refresh(project)
        return project_to_dict(project)

    except HTTPException:
        raise
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Project name already exists")
    except Exception as e:
        db.rollback()
        logger.error("Failed to update project", project_id=str(project_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to update project: {str(e)}")


@router.delete("/projects/{project_id}", response_model=Dict[str, Any])
async def delete_project(project_id: UUID, db: Session = Depends(get_db)):
    try:
        project = db.get(Project, project_id)
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")

        db.delete(project)
        db.commit()
        return {"message": "Project deleted successfully"}

    except HTTPException:
        raise
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Project is referenced by existing jiras")
    except Exception as e:
        db.rollback()
        logger.error("Failed to delete project", project_id=str(project_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to delete project: {str(e)}")


# Services

def _get_service(db: Session, service_id: UUID) -> Service:
    service = db.get(Service, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.get("/services", response_model=List[Dict[str, Any]])
async def list_services(db: Session = Depends(get_db)):
    try:
        return [service_to_dict(s) for s in db.query(Service).order_by(Service.name).all()]

    except Exception as e:
        logger.error("Failed to fetch services", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to fetch services: {str(e)}")


@router.get("/services/{service_id}", response_model=Dict[str, Any])
async def get_service(service_id: UUID, db: Session = Depends(get_db)):
    """Service with its per-environment details"""
    return service_to_dict(_get_service(db, service_id), include_details=True)


@router.post("/services", status_code=201, response_model=Dict[str, Any])
async def create_service(payload: ServicePayload, db: Session = Depends(get_db)):
    if not payload.name:
        raise HTTPException(status_code=400, detail="Service name is required")

    try:
        service = Service(**payload.model_dump())
        db.add(service)
        db.commit()
        db.refresh(service)
        return service_to_dict(service)

    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Service name already exists")
    except Exception as e:
        db.rollback()
        logger.error("Failed to create service", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to create service: {str(e)}")


@router.put("/services/{service_id}", response_model=Dict[str, Any])
async def update_service(service_id: UUID, payload: ServicePayload, db: Session = Depends(get_db)):
    try:
        service = _get_service(db, service_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(service, field, value)
        db.commit()
        db.refresh(service)
        return service_to_dict(service)

    except HTTPException:
        raise
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Service name already exists")
    except Exception as e:
        db.rollback()
        logger.error("Failed to update service", service_id=str(service_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to update service: {str(e)}")


@router.delete("/services/{service_id}", response_model=Dict[str, Any])
async def delete_service(service_id: UUID, db: Session = Depends(get_db)):
    """Delete a service together with its details"""
    try:
        service = _get_service(db, service_id)
        db.delete(service)
        db.commit()
        return {"message": "Service deleted successfully"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Failed to delete service", service_id=str(service_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to delete service: {str(e)}")


# Service details

def _get_detail(db: Session, service_id: UUID, detail_id: UUID) -> ServiceDetail:
    detail = (
        db.query(ServiceDetail)
        .filter(ServiceDetail.id == detail_id, ServiceDetail.service_id == service_id)
        .first()
    )
    if not detail:
        raise HTTPException(status_code=404, detail="Service detail not found")
    return detail


@router.get("/services/{service_id}/details", response_model=List[Dict[str, Any]])
async def list_service_details(service_id: UUID, db: Session = Depends(get_db)):
    service = _get_service(db, service_id)
    return [service_detail_to_dict(d) for d in service.details]


@router.get("/services/{service_id}/details/{detail_id}", response_model=Dict[str, Any])
async def get_service_detail(service_id: UUID, detail_id: UUID, db: Session = Depends(get_db)):
    return service_detail_to_dict(_get_detail(db, service_id, detail_id))


@router.post("/services/{service_id}/details", status_code=201, response_model=Dict[str, Any])
async def create_service_detail(service_id: UUID, payload: ServiceDetailPayload, db: Session = Depends(get_db)):
    """Add environment details; one record per environment"""
    if payload.env is None:
        raise HTTPException(status_code=400, detail="Environment is required")

    try:
        service = _get_service(db, service_id)
        detail = ServiceDetail(service_id=service.id, **payload.model_dump())
        db.add(detail)
        db.commit()
        db.refresh(detail)
        return service_detail_to_dict(detail)

    except HTTPException:
        raise
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"Details for {payload.env.value} already exist")
    except Exception as e:
        db.rollback()
        logger.error("Failed to create service detail", service_id=str(service_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to create service detail: {str(e)}")


@router.put("/services/{service_id}/details/{detail_id}", response_model=Dict[str, Any])
async def update_service_detail(service_id: UUID, detail_id: UUID, payload: ServiceDetailPayload,
                                db: Session = Depends(get_db)):
    try:
        detail = _get_detail(db, service_id, detail_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if field == "env" and value is None:
                continue
            setattr(detail, field, value)
        db.commit()
        db.refresh(detail)
        return service_detail_to_dict(detail)

    except HTTPException:
        raise
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Details for this environment already exist")
    except Exception as e:
        db.rollback()
        logger.error("Failed to update service detail", detail_id=str(detail_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to update service detail: {str(e)}")


@router.delete("/services/{service_id}/details/{detail_id}", response_model=Dict[str, Any])
async def delete_service_detail(service_id: UUID, detail_id: UUID, db: Session = Depends(get_db)):
    try:
        detail = _get_detail(db, service_id, detail_id)
        db.delete(detail)
        db.commit()
        return {"message": "Service detail deleted successfully"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Failed to delete service detail", detail_id=str(detail_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to delete service detail: {str(e)}")


# Log options

@router.get("/log-options", response_model=List[Dict[str, Any]])
async def list_log_options(db: Session = Depends(get_db)):
    return [log_option_to_dict(o) for o in db.query(LogOption).order_by(LogOption.name).all()]


@router.post("/log-options", status_code=201, response_model=Dict[str, Any])
async def create_log_option(payload: LogOptionPayload, db: Session = Depends(get_db)):
    try:
        option = LogOption(name=payload.name, color_code=payload.color_code)
        db.add(option)
        db.commit()
        db.refresh(option)
        return log_option_to_dict(option)

    except Exception as e:
        db.rollback()
        logger.error("Failed to create log option", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to create log option: {str(e)}")
