"""
Main API router for the application
"""
from fastapi import APIRouter

# Import all route modules
from api.endpoints import (
    admin,
    auth,
    dashboard,
    export,
    holidays,
    jira_status,
    jiras,
    master_data,
    summary,
    system,
    team,
)

# Create main API router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(jiras.router, prefix="/jiras", tags=["jiras"])
api_router.include_router(jira_status.router, tags=["jira"])
api_router.include_router(holidays.router, prefix="/holidays", tags=["holidays"])
api_router.include_router(master_data.router, tags=["master-data"])
api_router.include_router(team.router, prefix="/team", tags=["team"])
api_router.include_router(summary.router, prefix="/summary", tags=["summary"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(export.router, prefix="/export", tags=["export"])
api_router.include_router(system.router, prefix="/system", tags=["system"])
