"""
JIRA connector for live issue statuses and assignments
"""
from typing import Any, Dict, Iterable, List, Optional

from jira import JIRA, JIRAError

from config import settings
from connectors.errors import ExternalServiceError
from utils.logging import get_logger, log_status_sync

logger = get_logger(__name__)

STATUS_FIELDS = "status"
ASSIGNED_FIELDS = "summary,created,reporter,status,assignee"


def _service_error(error: Exception) -> ExternalServiceError:
    if isinstance(error, JIRAError):
        return ExternalServiceError("JIRA", error.text or str(error), error.status_code)
    return ExternalServiceError("JIRA", str(error))


class JiraConnector:
    """Thin wrapper around the JIRA REST client"""

    def __init__(self, client: Optional[JIRA] = None):
        self.client = client

    def _get_client(self) -> JIRA:
        if self.client is not None:
            return self.client

        if not settings.atlassian.jira_url:
            raise ExternalServiceError("JIRA", "JIRA_URL is not configured")

        try:
            self.client = JIRA(
                server=settings.atlassian.jira_url,
                basic_auth=(
                    settings.atlassian.jira_username,
                    settings.atlassian.jira_api_token
                )
            )
            logger.info("JIRA connection established successfully")
            return self.client

        except (JIRAError, OSError) as e:
            logger.error("Failed to connect to JIRA", error=str(e))
            raise _service_error(e)

    def lookup_keys(self, jira_numbers: Iterable[str]) -> List[str]:
        """Unique, non-internal keys in input order"""
        prefix = settings.atlassian.internal_key_prefix
        keys = []
        for number in jira_numbers:
            number = (number or "").strip()
            if number and not (prefix and number.startswith(prefix)) and number not in keys:
                keys.append(number)
        return keys

    async def fetch_statuses(self, jira_numbers: Iterable[str]) -> Dict[str, Optional[str]]:
        """Map issue key -> current JIRA status name"""
        keys = self.lookup_keys(jira_numbers)
        if not keys:
            return {}

        jql = f"key in ({','.join(keys)})"
        try:
            issues = self._get_client().search_issues(jql, fields=STATUS_FIELDS, maxResults=False)
        except (JIRAError, OSError) as e:
            logger.error("Failed to fetch JIRA statuses", keys=len(keys), error=str(e))
            raise _service_error(e)

        statuses = {}
        for issue in issues:
            status = getattr(issue.fields, "status", None)
            statuses[issue.key] = status.name if status is not None else None

        log_status_sync("JIRA", len(statuses), requested=len(keys))
        return statuses

    async def fetch_assigned_issues(self, email: str) -> List[Dict[str, Any]]:
        """Issues assigned to ``email`` in JIRA"""
        jql = f'assignee="{email}"'
        try:
            issues = self._get_client().search_issues(jql, fields=ASSIGNED_FIELDS, maxResults=False)
        except (JIRAError, OSError) as e:
            logger.error("Failed to fetch assigned JIRA issues", email=email, error=str(e))
            raise _service_error(e)

        results = []
        for issue in issues:
            fields = issue.fields
            results.append({
                "key": issue.key,
                "summary": getattr(fields, "summary", None),
                "created": getattr(fields, "created", None),
                "status": self._name(getattr(fields, "status", None)),
                "reporter": self._display_name(getattr(fields, "reporter", None)),
                "assignee": self._display_name(getattr(fields, "assignee", None)),
            })

        logger.info("Fetched assigned JIRA issues", email=email, count=len(results))
        return results

    @staticmethod
    def _name(value) -> Optional[str]:
        return getattr(value, "name", None) if value is not None else None

    @staticmethod
    def _display_name(value) -> Optional[str]:
        return getattr(value, "displayName", None) if value is not None else None


def get_jira_connector() -> JiraConnector:
    """FastAPI dependency"""
    return JiraConnector()
