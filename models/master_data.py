"""
Master data models: projects, services and log options
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
import uuid
import enum

from core.database import Base


class Environment(str, enum.Enum):
    """Deployment environments"""
    SIT = "SIT"
    UAT = "UAT"
    PREPROD = "PREPROD"
    PROD = "PROD"


class Project(Base):
    """Project master data"""
    __tablename__ = "projects"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), unique=True, nullable=False)
    type = Column(String(100))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Service(Base):
    """Deployable service"""
    __tablename__ = "services"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), unique=True, nullable=False)
    repository = Column(String(500))
    deploy_by = Column(String(255))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    details = relationship(
        "ServiceDetail",
        back_populates="service",
        cascade="all, delete-orphan",
        order_by="ServiceDetail.env"
    )


class ServiceDetail(Base):
    """Per-environment connection details of a service"""
    __tablename__ = "service_details"
    __table_args__ = (UniqueConstraint("service_id", "env", name="uq_service_env"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    env = Column(Enum(Environment), nullable=False)

    url = Column(String(500))
    database1 = Column(String(255))
    database2 = Column(String(255))
    database3 = Column(String(255))
    server = Column(String(255))
    soap = Column(String(500))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    service = relationship("Service", back_populates="details")


class LogOption(Base):
    """Tag that can be attached to daily logs"""
    __tablename__ = "log_options"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    color_code = Column(String(20), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
