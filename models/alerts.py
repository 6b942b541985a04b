"""
Alert models produced by the workload analytics
"""
from typing import Optional
from pydantic import BaseModel
import enum


class AlertSeverity(str, enum.Enum):
    """Alert priority levels"""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class AlertType(str, enum.Enum):
    """Visual category of an alert"""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


SEVERITY_ORDER = {
    AlertSeverity.CRITICAL: 4,
    AlertSeverity.HIGH: 3,
    AlertSeverity.MEDIUM: 2,
    AlertSeverity.LOW: 1,
    AlertSeverity.INFO: 0,
}


class Alert(BaseModel):
    """Computed alert; not persisted"""
    id: str
    type: AlertType
    priority: AlertSeverity
    title: str
    message: str
    details: Optional[str] = None
    action: Optional[str] = None
    team_name: Optional[str] = None


def sort_alerts(alerts):
    """Most urgent first; stable for equal priorities"""
    return sorted(alerts, key=lambda alert: SEVERITY_ORDER[alert.priority], reverse=True)
