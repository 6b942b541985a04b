"""
Working-day calendar helpers

All functions take plain ``date`` objects and an optional collection of
holiday dates. Saturdays and Sundays are never working days.
"""
import calendar
from datetime import date, timedelta
from typing import Iterable, Optional, Tuple

from config import settings


def daily_hours() -> float:
    """Standard working hours in one day (HOURS_PER_DAY)"""
    return settings.workload.hours_per_day


def is_working_day(day: date, holidays: Iterable[date] = ()) -> bool:
    """True for Monday-Friday dates that are not holidays"""
    return day.weekday() < 5 and day not in set(holidays)


def working_days_between(start: date, end: date, holidays: Iterable[date] = ()) -> int:
    """Count working days in the inclusive range ``start``..``end``"""
    holiday_set = set(holidays)
    count = 0
    current = start
    while current <= end:
        if current.weekday() < 5 and current not in holiday_set:
            count += 1
        current += timedelta(days=1)
    return count


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def working_days_in_month(year: int, month: int, holidays: Iterable[date] = ()) -> int:
    first, last = month_bounds(year, month)
    return working_days_between(first, last, holidays)


def working_hours_capacity(working_days: int, hours_per_day: Optional[float] = None) -> float:
    if hours_per_day is None:
        hours_per_day = daily_hours()
    return working_days * hours_per_day


def working_days_passed(today: date, holidays: Iterable[date] = ()) -> int:
    """Working days from the first of the month up to and including today"""
    return working_days_between(today.replace(day=1), today, holidays)


def remaining_working_days(today: date, holidays: Iterable[date] = ()) -> int:
    """Working days from today through the end of the month"""
    _, last = month_bounds(today.year, today.month)
    return working_days_between(today, last, holidays)


def previous_month(year: int, month: int) -> Tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> Tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def week_start(day: date) -> date:
    """Sunday that opens the week containing ``day``"""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def in_month(value: Optional[date], year: int, month: int) -> bool:
    return value is not None and value.year == year and value.month == month
