"""
Bank of Thailand financial-institution holiday calendar connector
"""
from typing import Any, Dict, List, Optional
import httpx

from config import settings
from connectors.errors import ExternalServiceError
from utils.logging import get_logger

logger = get_logger(__name__)

SERVICE = "Holiday API"


class HolidayConnector:
    """Fetches public holidays for a year"""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self.base_url = settings.holidays.api_url
        self.api_key = settings.holidays.api_key
        self.http_client = http_client or httpx.AsyncClient(timeout=30.0)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def fetch_holidays(self, year: int) -> List[Dict[str, Any]]:
        """Holidays as ``{date, name, name_eng, week_day}`` records"""
        if not self.configured:
            raise ExternalServiceError(SERVICE, "BOT_API_KEY is not configured")

        try:
            response = await self.http_client.get(
                self.base_url,
                params={"year": year},
                headers={
                    "X-IBM-Client-Id": self.api_key,
                    "Accept": "application/json",
                }
            )
        except httpx.HTTPError as e:
            logger.error("Holiday API request failed", year=year, error=str(e))
            raise ExternalServiceError(SERVICE, str(e))

        body = response.text
        if "<!DOCTYPE" in body or "<html" in body:
            logger.error("Holiday API returned HTML instead of JSON",
                         year=year, status=response.status_code)
            raise ExternalServiceError(SERVICE, self._html_error(response.status_code), response.status_code)

        if response.status_code >= 400:
            raise ExternalServiceError(SERVICE, f"HTTP {response.status_code}", response.status_code)

        try:
            data = response.json()
        except ValueError:
            logger.error("Holiday API returned invalid JSON", year=year, body=body[:200])
            raise ExternalServiceError(SERVICE, "Invalid JSON response")

        records = (data.get("result") or {}).get("data") if isinstance(data, dict) else None
        if records is None:
            raise ExternalServiceError(SERVICE, "Response missing expected data structure")

        holidays = [
            {
                "date": record.get("Date"),
                "name": record.get("HolidayDescriptionThai"),
                "name_eng": record.get("HolidayDescriptionEnglish") or "",
                "week_day": record.get("WeekDay") or "",
            }
            for record in records
        ]

        logger.info("Fetched holidays", year=year, count=len(holidays))
        return holidays

    @staticmethod
    def _html_error(status_code: int) -> str:
        if status_code == 401:
            return "Invalid API Key or authentication failed"
        if status_code == 403:
            return "Access forbidden. Check API permissions."
        if status_code == 404:
            return "API endpoint not found. URL might have changed."
        return f"API returned HTML instead of JSON. Status: {status_code}"

    async def close(self):
        await self.http_client.aclose()
