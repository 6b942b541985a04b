"""
Holiday lookup with a Redis-backed daily cache
"""
import json
from datetime import date
from typing import Any, Dict, List, Optional, Set

import redis
from fastapi import Depends

from config import settings
from connectors.errors import ExternalServiceError
from connectors.holidays import HolidayConnector
from core.database import get_redis
from utils.logging import get_logger

logger = get_logger(__name__)


class HolidayService:
    """Holiday records per year, cached for ``cache_ttl_seconds``"""

    def __init__(self, connector: HolidayConnector, cache: Optional[redis.Redis] = None):
        self.connector = connector
        self.cache = cache

    @staticmethod
    def _cache_key(year: int) -> str:
        return f"holidays:{year}"

    def _read_cache(self, year: int) -> Optional[List[Dict[str, Any]]]:
        if self.cache is None:
            return None
        try:
            cached = self.cache.get(self._cache_key(year))
        except redis.RedisError as e:
            logger.warning("Holiday cache unavailable, bypassing", error=str(e))
            return None
        return json.loads(cached) if cached else None

    def _write_cache(self, year: int, holidays: List[Dict[str, Any]]):
        if self.cache is None:
            return
        try:
            self.cache.set(self._cache_key(year), json.dumps(holidays),
                           ex=settings.database.cache_ttl_seconds)
        except redis.RedisError as e:
            logger.warning("Failed to cache holidays", year=year, error=str(e))

    async def get_holidays(self, year: int) -> List[Dict[str, Any]]:
        """Holiday records; raises ``ExternalServiceError`` when the API fails"""
        cached = self._read_cache(year)
        if cached is not None:
            return cached

        holidays = await self.connector.fetch_holidays(year)
        self._write_cache(year, holidays)
        return holidays

    async def holiday_dates(self, year: int) -> Set[date]:
        """Holiday dates for capacity maths; empty when the calendar is unavailable"""
        try:
            holidays = await self.get_holidays(year)
        except ExternalServiceError as e:
            logger.warning("Holidays unavailable, using weekends only", year=year, error=str(e))
            return set()

        dates = set()
        for holiday in holidays:
            try:
                dates.add(date.fromisoformat(str(holiday["date"])[:10]))
            except (KeyError, ValueError):
                logger.debug("Skipping malformed holiday", holiday=holiday)
        return dates


async def get_holiday_service(cache: Optional[redis.Redis] = Depends(get_redis)):
    """FastAPI dependency; closes the HTTP client after the request"""
    connector = HolidayConnector()
    try:
        yield HolidayService(connector, cache)
    finally:
        await connector.close()
