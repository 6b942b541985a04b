"""
Worklog Dashboard backend
Task time tracking, team analytics and work log export on top of JIRA
"""
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import api_router
from config import settings
from core.database import check_connections, init_db
from core.scheduler import start_scheduler, stop_scheduler
from utils.logging import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title=settings.app.app_name,
    description="Daily work logs, team lead and IT lead analytics",
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.app.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    """Create tables and start scheduled jobs"""
    logger.info("Starting Worklog Dashboard", app_name=settings.app.app_name)
    init_db()

    if settings.scheduling.enabled:
        start_scheduler()


@app.on_event("shutdown")
async def shutdown_event():
    if settings.scheduling.enabled:
        stop_scheduler()


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"message": f"{settings.app.app_name} API", "status": "healthy"}


@app.get("/health")
async def health_check():
    """Detailed health check with backing service status"""
    connections = check_connections()
    return {
        "status": "healthy" if connections["database"] else "degraded",
        "app_name": settings.app.app_name,
        "version": "1.0.0",
        "connections": connections,
        "jira_configured": bool(settings.atlassian.jira_url),
        "holiday_api_configured": bool(settings.holidays.api_key),
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.app.host,
        port=settings.app.port,
        reload=settings.app.debug,
        log_level="info"
    )
