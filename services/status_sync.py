"""
Refresh stored JIRA statuses from the live tracker
"""
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from connectors.jira import JiraConnector
from models.jira import Jira
from utils.logging import get_logger

logger = get_logger(__name__)

CLOSED_STATUSES = ("done", "closed")


def open_jiras(db: Session):
    return (
        db.query(Jira)
        .filter(or_(Jira.actual_status.is_(None), func.lower(Jira.actual_status).notin_(CLOSED_STATUSES)))
        .all()
    )


async def sync_jira_statuses(db: Session, connector: JiraConnector) -> int:
    """Copy live JIRA statuses onto open tasks; returns the number changed"""
    jiras = open_jiras(db)
    statuses = await connector.fetch_statuses(j.jira_number for j in jiras)

    updated = 0
    for jira in jiras:
        status = statuses.get(jira.jira_number)
        if status and status != jira.jira_status:
            jira.jira_status = status
            updated += 1

    db.commit()
    logger.info("JIRA status sync finished", checked=len(jiras), updated=updated)
    return updated
