"""
Task scheduler for JIRA status sync and holiday cache warm-up
"""
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from datetime import datetime
from sqlalchemy.orm import Session

from config import settings
from connectors.holidays import HolidayConnector
from connectors.jira import JiraConnector
from core.database import SessionLocal, redis_client
from services.holidays import HolidayService
from services.status_sync import sync_jira_statuses
from utils.logging import get_logger

logger = get_logger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler()


async def run_status_sync(db: Session, connector: JiraConnector) -> int:
    """Refresh jira_status of every open task; errors reach the caller"""
    try:
        return await sync_jira_statuses(db, connector)
    except Exception:
        db.rollback()
        raise


async def daily_status_sync():
    """Scheduled wrapper around ``run_status_sync`` that only logs failures"""
    db = SessionLocal()
    try:
        logger.info("Starting daily JIRA status sync",
                    timestamp=datetime.utcnow().isoformat())
        updated = await run_status_sync(db, JiraConnector())
        logger.info("Daily JIRA status sync completed", updated=updated)

    except Exception as e:
        logger.error("Daily JIRA status sync failed", error=str(e), exc_info=True)
    finally:
        db.close()


async def warm_holiday_cache():
    """Load this year's holidays into the cache"""
    connector = HolidayConnector()
    try:
        if not connector.configured:
            logger.info("Holiday API not configured, skipping cache warm-up")
            return
        year = datetime.now().year
        holidays = await HolidayService(connector, redis_client).get_holidays(year)
        logger.info("Holiday cache warmed", year=year, count=len(holidays))

    except Exception as e:
        logger.error("Holiday cache warm-up failed", error=str(e))
    finally:
        await connector.close()


def start_scheduler():
    """Start the task scheduler"""
    try:
        hour, minute = map(int, settings.scheduling.status_sync_time.split(':'))

        scheduler.add_job(
            daily_status_sync,
            trigger=CronTrigger(
                hour=hour,
                minute=minute,
                timezone=settings.scheduling.timezone
            ),
            id='daily_status_sync',
            name='Daily JIRA Status Sync',
            replace_existing=True
        )

        # Shortly after midnight so the first request of the day hits the cache
        scheduler.add_job(
            warm_holiday_cache,
            trigger=CronTrigger(
                hour=0,
                minute=5,
                timezone=settings.scheduling.timezone
            ),
            id='holiday_cache',
            name='Holiday Cache Warm-up',
            replace_existing=True
        )

        scheduler.start()

        logger.info("Scheduler started successfully",
                    status_sync_time=settings.scheduling.status_sync_time,
                    timezone=settings.scheduling.timezone)

    except Exception as e:
        logger.error("Failed to start scheduler", error=str(e))
        raise


def stop_scheduler():
    """Stop the task scheduler"""
    try:
        scheduler.shutdown()
        logger.info("Scheduler stopped successfully")
    except Exception as e:
        logger.error("Failed to stop scheduler", error=str(e))


def get_scheduler_status():
    """Get current scheduler status and job information"""
    if not scheduler.running:
        return {"status": "stopped", "jobs": []}

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
            "trigger": str(job.trigger)
        })

    return {
        "status": "running",
        "jobs": jobs
    }


async def trigger_status_sync_now(db: Session, connector: JiraConnector) -> int:
    """Run the status sync outside its schedule and return the number updated"""
    logger.info("Manually triggering JIRA status sync")
    return await run_status_sync(db, connector)
