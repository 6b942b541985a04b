"""
User and team models
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON, Boolean, ForeignKey, Table, Uuid
from sqlalchemy.orm import relationship
import uuid
import enum

from core.database import Base


class Role(str, enum.Enum):
    """User roles"""
    DEVELOPER = "DEVELOPER"
    TEAM_LEAD = "TEAM LEAD"
    IT_LEAD = "IT LEAD"
    ADMIN = "ADMIN"


class UserType(str, enum.Enum):
    """Staff classification used by IT lead rollups"""
    CORE = "Core"
    NON_CORE = "Non-Core"


VALID_ROLES = [role.value for role in Role]


team_members = Table(
    "team_members",
    Base.metadata,
    Column("team_id", Uuid(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """Application user"""
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(255), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # werkzeug hash
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(50))
    type = Column(String(20), default=UserType.NON_CORE.value, nullable=False)
    roles = Column(JSON, default=lambda: [Role.DEVELOPER.value], nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    teams = relationship("Team", secondary=team_members, back_populates="members")

    def has_role(self, *roles: str) -> bool:
        return any(role in (self.roles or []) for role in roles)


class Team(Base):
    """Roster managed by a team lead"""
    __tablename__ = "teams"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    team_lead_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    team_name = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    team_lead = relationship("User", foreign_keys=[team_lead_id])
    members = relationship("User", secondary=team_members, back_populates="teams", order_by="User.username")

    @property
    def member_ids(self):
        return [member.id for member in self.members]
