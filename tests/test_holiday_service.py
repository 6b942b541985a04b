"""
Tests for the cached holiday lookup
"""
import asyncio
import json
from datetime import date

import redis

from connectors.errors import ExternalServiceError
from services.holidays import HolidayService

HOLIDAYS = [
    {"date": "2024-05-01", "name": "Labour Day", "name_eng": "Labour Day", "week_day": "Wednesday"},
    {"date": "2024-05-22", "name": "Visakha Bucha", "name_eng": "Visakha Bucha Day", "week_day": "Wednesday"},
]


class StubConnector:
    def __init__(self, holidays=None, error=None):
        self.holidays = holidays or []
        self.error = error
        self.calls = 0

    async def fetch_holidays(self, year):
        self.calls += 1
        if self.error:
            raise self.error
        return self.holidays


class DictCache:
    def __init__(self):
        self.values = {}
        self.ttl = {}

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value, ex=None):
        self.values[key] = value
        self.ttl[key] = ex


class BrokenCache:
    def get(self, key):
        raise redis.ConnectionError("down")

    def set(self, key, value, ex=None):
        raise redis.ConnectionError("down")


class TestHolidayService:
    """Caching and failure fall-back."""

    def test_second_lookup_served_from_cache(self):
        connector, cache = StubConnector(HOLIDAYS), DictCache()
        service = HolidayService(connector, cache)

        first = asyncio.run(service.get_holidays(2024))
        second = asyncio.run(service.get_holidays(2024))

        assert first == second == HOLIDAYS
        assert connector.calls == 1
        assert json.loads(cache.values["holidays:2024"]) == HOLIDAYS
        assert cache.ttl["holidays:2024"] == 86400

    def test_cache_errors_bypass_cache(self):
        connector = StubConnector(HOLIDAYS)
        service = HolidayService(connector, BrokenCache())

        assert asyncio.run(service.get_holidays(2024)) == HOLIDAYS
        assert connector.calls == 1

    def test_holiday_dates(self):
        service = HolidayService(StubConnector(HOLIDAYS + [{"date": None}]))

        dates = asyncio.run(service.holiday_dates(2024))

        assert dates == {date(2024, 5, 1), date(2024, 5, 22)}

    def test_upstream_failure_means_no_holidays(self):
        service = HolidayService(StubConnector(error=ExternalServiceError("Holiday API", "timeout")))
        assert asyncio.run(service.holiday_dates(2024)) == set()
