"""
Grouping of tasks and daily logs into monthly report buckets
"""
from datetime import date, datetime
from typing import Any, Dict, Iterable

from services.working_days import working_days_in_month, daily_hours
from utils.serializers import jira_to_dict, log_to_dict

GROUP_VIEWS = {
    "project": "project_name",
    "service": "service_name",
    "environment": "environment",
}
VALID_VIEWS = list(GROUP_VIEWS) + ["jira"]


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _month_key(day: date) -> str:
    return f"{day.year}-{day.month:02d}"


def _bucket_item(grouped: Dict, year: int, month: str, name: str) -> Dict[str, Any]:
    months = grouped.setdefault(str(year), {})
    items = months.setdefault(month, [])
    for item in items:
        if item["name"] == name:
            return item
    item = {"id": name, "name": name, "logs": [], "total_hours": 0.0, "jiras": [], "_jira_ids": set()}
    items.append(item)
    return item


def _attach_jira(item: Dict[str, Any], jira, year: int, month: int):
    if jira.id in item["_jira_ids"] and jira.id is not None:
        return
    item["_jira_ids"].add(jira.id)
    month_logs = [
        log for log in jira.daily_logs
        if log.log_date.year == year and log.log_date.month == month
    ]
    item["jiras"].append(jira_to_dict(jira, month_logs))


def group_jiras(jiras: Iterable, view: str, holidays: Iterable[date] = ()) -> Dict[str, Any]:
    """Group tasks for the monthly report views.

    ``project``, ``service`` and ``environment`` views bucket every log into
    ``grouped[year][MM]`` under the task's project/service/environment name.
    Tasks without logs are placed in the month they are due (or were created
    when no due date is set). The ``jira`` view buckets whole tasks by the
    month they were created and compares their hours to capacity.
    """
    if view not in VALID_VIEWS:
        raise ValueError(f"Unknown view '{view}', expected one of {VALID_VIEWS}")

    holidays = set(holidays)
    grouped: Dict[str, Any] = {}
    month_used_hours: Dict[str, float] = {}
    month_capacities: Dict[str, float] = {}
    jiras = list(jiras)

    for jira in jiras:
        name_field = GROUP_VIEWS.get(view)
        label = f"Unknown {view.capitalize()}"

        for log in jira.daily_logs:
            key = _month_key(log.log_date)
            hours = float(log.time_spent or 0)
            if key not in month_capacities:
                working_days = working_days_in_month(log.log_date.year, log.log_date.month, holidays)
                month_capacities[key] = working_days * daily_hours()
            month_used_hours[key] = month_used_hours.get(key, 0.0) + hours

            if name_field:
                name = getattr(jira, name_field) or label
                item = _bucket_item(grouped, log.log_date.year, f"{log.log_date.month:02d}", name)
                item["logs"].append(log_to_dict(log, jira.id))
                item["total_hours"] += hours
                _attach_jira(item, jira, log.log_date.year, log.log_date.month)

        if name_field and not jira.daily_logs:
            anchor = _as_date(jira.due_date or jira.created_at)
            if anchor is not None:
                name = getattr(jira, name_field) or label
                item = _bucket_item(grouped, anchor.year, f"{anchor.month:02d}", name)
                _attach_jira(item, jira, anchor.year, anchor.month)

        if view == "jira" and jira.created_at is not None:
            created = _as_date(jira.created_at)
            group_key = f"{created.year}-{created.strftime('%B')}"
            group = grouped.setdefault(group_key, {"jiras": [], "total_hours": 0.0, "capacity": 0.0, "gap": 0.0})
            group["jiras"].append(jira)

    if view == "jira":
        for group in grouped.values():
            total_hours = 0.0
            capacity = 0.0
            for jira in group["jiras"]:
                total_hours += sum(float(log.time_spent or 0) for log in jira.daily_logs)
                created = _as_date(jira.created_at)
                capacity += working_days_in_month(created.year, created.month, holidays) * daily_hours()
            group["jiras"] = [jira_to_dict(jira) for jira in group["jiras"]]
            group["total_hours"] = total_hours
            group["capacity"] = capacity
            group["gap"] = capacity - total_hours
    else:
        for months in grouped.values():
            for items in months.values():
                for item in items:
                    item.pop("_jira_ids", None)
                    item["logs"].sort(key=lambda log: log["log_date"])
                    item["total_hours_for_month"] = sum(log["time_spent"] for log in item["logs"])

    return {
        "grouped": grouped,
        "month_used_hours": month_used_hours,
        "month_capacities": month_capacities,
    }
