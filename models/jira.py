"""
Task (JIRA) and daily log models
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Text, Float, ForeignKey, Table, Uuid
from sqlalchemy.orm import relationship
import uuid

from core.database import Base


DEPLOY_DATE_FIELDS = {
    "SIT": "deploy_sit_date",
    "UAT": "deploy_uat_date",
    "PREPROD": "deploy_preprod_date",
    "PROD": "deploy_prod_date",
}


daily_log_options = Table(
    "daily_log_options",
    Base.metadata,
    Column("daily_log_id", Uuid(as_uuid=True), ForeignKey("daily_logs.id", ondelete="CASCADE"), primary_key=True),
    Column("log_option_id", Uuid(as_uuid=True), ForeignKey("log_options.id", ondelete="CASCADE"), primary_key=True),
)


class Jira(Base):
    """Locally tracked JIRA task"""
    __tablename__ = "jiras"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.id"), nullable=True)
    project_name = Column(String(255))

    jira_number = Column(String(50), nullable=False)
    description = Column(Text)
    service_name = Column(String(255))
    assignee = Column(String(255))
    effort_estimation = Column(Float)

    # Status as reported by JIRA vs tracked locally
    jira_status = Column(String(100))
    actual_status = Column(String(100))

    related_jira = Column(String(255))
    environment = Column(String(50))
    env_detail = Column(Text)
    sql_detail = Column(Text)

    due_date = Column(Date, nullable=True)
    deploy_sit_date = Column(Date, nullable=True)
    deploy_uat_date = Column(Date, nullable=True)
    deploy_preprod_date = Column(Date, nullable=True)
    deploy_prod_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("User")
    project = relationship("Project")
    daily_logs = relationship(
        "DailyLog",
        back_populates="jira",
        cascade="all, delete-orphan",
        order_by="DailyLog.log_date"
    )


class DailyLog(Base):
    """Hours spent on a task on a given date"""
    __tablename__ = "daily_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    jira_id = Column(Uuid(as_uuid=True), ForeignKey("jiras.id", ondelete="CASCADE"), nullable=False, index=True)

    log_date = Column(Date, nullable=False)
    task_description = Column(Text, nullable=False)
    time_spent = Column(Float, nullable=False)
    detail = Column(Text, default="")
    env_detail = Column(Text)
    sql_detail = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    jira = relationship("Jira", back_populates="daily_logs")
    options = relationship("LogOption", secondary=daily_log_options)
