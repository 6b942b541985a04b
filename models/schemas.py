"""
Request payload schemas
"""
from datetime import date
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from models.master_data import Environment


class RegisterRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    type: Optional[str] = None


class UpdateRoleRequest(BaseModel):
    user_id: UUID
    new_roles: List[str]


class JiraCreate(BaseModel):
    jira_number: str
    project_id: Optional[UUID] = None
    project_name: Optional[str] = None
    description: Optional[str] = None
    service_name: Optional[str] = None
    assignee: Optional[str] = None
    effort_estimation: Optional[float] = None
    jira_status: Optional[str] = None
    actual_status: Optional[str] = None
    related_jira: Optional[str] = None
    environment: Optional[str] = None
    env_detail: Optional[str] = None
    sql_detail: Optional[str] = None
    due_date: Optional[date] = None


class JiraUpdate(BaseModel):
    project_name: Optional[str] = None
    service_name: Optional[str] = None
    jira_number: Optional[str] = None
    description: Optional[str] = None
    assignee: Optional[str] = None
    effort_estimation: Optional[float] = None
    jira_status: Optional[str] = None
    actual_status: Optional[str] = None
    related_jira: Optional[str] = None
    environment: Optional[str] = None
    due_date: Optional[date] = None


class JiraStatusUpdate(BaseModel):
    """Partial update used by status boards and deployment tracking"""
    jira_status: Optional[str] = None
    actual_status: Optional[str] = None
    deploy_sit_date: Optional[date] = None
    deploy_uat_date: Optional[date] = None
    deploy_preprod_date: Optional[date] = None
    deploy_prod_date: Optional[date] = None


class DailyLogCreate(BaseModel):
    log_date: date
    task_description: str
    time_spent: float = Field(ge=0)
    detail: Optional[str] = ""
    env_detail: Optional[str] = None
    sql_detail: Optional[str] = None
    log_options: List[UUID] = []


class DailyLogUpdate(BaseModel):
    log_date: Optional[date] = None
    task_description: Optional[str] = None
    time_spent: Optional[float] = Field(default=None, ge=0)
    env_detail: Optional[str] = None
    sql_detail: Optional[str] = None


class DeployRequest(BaseModel):
    environment: Environment
    deploy_date: date


class ProjectPayload(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None


class ServicePayload(BaseModel):
    name: Optional[str] = None
    repository: Optional[str] = None
    deploy_by: Optional[str] = None


class ServiceDetailPayload(BaseModel):
    env: Optional[Environment] = None
    url: Optional[str] = None
    database1: Optional[str] = None
    database2: Optional[str] = None
    database3: Optional[str] = None
    server: Optional[str] = None
    soap: Optional[str] = None


class LogOptionPayload(BaseModel):
    name: str
    color_code: str


class TeamPayload(BaseModel):
    team_name: Optional[str] = None
    member_ids: Optional[List[UUID]] = None


class TeamMembersPayload(BaseModel):
    member_ids: Optional[List[UUID]] = None
