"""
Errors raised by external service connectors
"""
from typing import Optional


class ExternalServiceError(Exception):
    """An upstream API (JIRA, holiday calendar) failed or returned bad data"""

    def __init__(self, service: str, message: str, status_code: Optional[int] = None):
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")
