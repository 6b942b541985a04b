"""
Team lead summary built from every member's tasks and logs
"""
from collections import Counter, defaultdict
from datetime import date, datetime
from typing import Any, Dict, Iterable, List

from models.jira import DEPLOY_DATE_FIELDS
from services.working_days import (
    daily_hours,
    in_month,
    next_month,
    week_start,
    working_days_in_month,
    working_days_passed,
)

INACTIVE_KEYWORDS = ("done", "closed", "cancelled", "canceled", "deployed")
BLOCKED_KEYWORDS = ("block", "wait", "hold")
STALE_DAYS = 3
DEADLINE_WINDOW_DAYS = 7


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def task_status(jira) -> str:
    return (jira.actual_status or jira.jira_status or "").lower()


def is_active(jira) -> bool:
    status = task_status(jira)
    return not any(keyword in status for keyword in INACTIVE_KEYWORDS)


def is_blocked(jira) -> bool:
    status = task_status(jira)
    return any(keyword in status for keyword in BLOCKED_KEYWORDS)


def is_in_progress(jira) -> bool:
    status = task_status(jira)
    return "in progress" in status or "develop" in status


def is_ready_for_prod(jira) -> bool:
    status = task_status(jira)
    return "ready" in status and "prod" in status


def _days_since(value, today: date) -> int:
    return (today - _as_date(value)).days if value is not None else 0


def _brief(jira, username: str, **extra) -> Dict[str, Any]:
    data = {
        "id": str(jira.id),
        "jira_number": jira.jira_number,
        "description": jira.description,
        "project_name": jira.project_name,
        "actual_status": jira.actual_status,
        "assignee": username,
    }
    data.update(extra)
    return data


def _deployments(jiras: List, year: int, month: int) -> Dict[str, int]:
    counts = {}
    for env, field in DEPLOY_DATE_FIELDS.items():
        counts[env] = sum(1 for j in jiras if in_month(getattr(j, field), year, month))
    counts["total"] = sum(counts.values())
    return counts


def team_summary(team_data: Iterable[Dict[str, Any]], today: date,
                 holidays: Iterable[date] = ()) -> Dict[str, Any]:
    """Aggregate the current month for a team.

    ``team_data`` items are ``{"user": User, "jiras": [Jira, ...]}``. Hours
    expected to date are elapsed working days times 8 per member; status
    buckets match on substrings so free-text local statuses still count.
    """
    holidays = set(holidays)
    team_data = list(team_data)
    team_size = len(team_data)

    total_days = working_days_in_month(today.year, today.month, holidays)
    days_passed = working_days_passed(today, holidays)
    this_week = week_start(today)

    month_hours = 0.0
    week_hours = 0.0
    active_count = 0
    completed_count = 0
    in_progress_count = 0
    ready_count = 0
    blocked = []
    stale = []
    deadlines = []
    statuses = Counter()
    contributor_hours: Dict[str, float] = defaultdict(float)
    project_active: Dict[str, int] = defaultdict(int)
    members = []
    all_jiras = []

    for entry in team_data:
        user = entry["user"]
        jiras = list(entry["jiras"])
        all_jiras.extend(jiras)
        member_month = 0.0
        member_active = 0
        last_log = None

        for jira in jiras:
            for log in jira.daily_logs:
                hours = float(log.time_spent or 0)
                if in_month(log.log_date, today.year, today.month):
                    member_month += hours
                if this_week <= log.log_date <= today:
                    week_hours += hours
                if last_log is None or log.log_date > last_log:
                    last_log = log.log_date

            statuses[jira.actual_status or jira.jira_status or "Unknown"] += 1

            if not is_active(jira):
                if jira.updated_at is not None and in_month(_as_date(jira.updated_at), today.year, today.month):
                    completed_count += 1
                continue

            active_count += 1
            member_active += 1
            project_active[jira.project_name or "Unknown Project"] += 1
            if is_blocked(jira):
                blocked.append(_brief(
                    jira, user.username,
                    days_since_update=_days_since(jira.updated_at or jira.created_at, today)
                ))
            if is_in_progress(jira):
                in_progress_count += 1
            if is_ready_for_prod(jira):
                ready_count += 1

            if jira.due_date is not None:
                remaining = (jira.due_date - today).days
                if 0 <= remaining <= DEADLINE_WINDOW_DAYS:
                    deadlines.append(_brief(jira, user.username, days_remaining=remaining,
                                            due_date=jira.due_date.isoformat()))

            if jira.daily_logs:
                idle = (today - max(log.log_date for log in jira.daily_logs)).days
            else:
                idle = _days_since(jira.created_at, today)
            if idle > STALE_DAYS:
                stale.append(_brief(jira, user.username, days_since_last_log=idle))

        month_hours += member_month
        contributor_hours[user.username] += member_month
        members.append({
            "user_id": str(user.id),
            "username": user.username,
            "type": user.type,
            "month_hours": member_month,
            "active_tasks": member_active,
            "last_log_date": last_log.isoformat() if last_log else None,
            "utilization": round(member_month / (days_passed * daily_hours()) * 100, 1) if days_passed else 0,
        })

    expected_hours = days_passed * daily_hours() * team_size
    capacity = total_days * daily_hours() * team_size
    next_year, next_mon = next_month(today.year, today.month)

    blocked.sort(key=lambda item: item["days_since_update"], reverse=True)
    stale.sort(key=lambda item: item["days_since_last_log"], reverse=True)
    deadlines.sort(key=lambda item: item["days_remaining"])

    return {
        "team_size": team_size,
        "month": f"{today.year}-{today.month:02d}",
        "total_working_days": total_days,
        "working_days_passed": days_passed,
        "month_progress": round(days_passed / total_days * 100, 1) if total_days else 0,
        "month_hours": month_hours,
        "week_hours": week_hours,
        "expected_hours": expected_hours,
        "capacity": capacity,
        "utilization": round(month_hours / expected_hours * 100, 1) if expected_hours else 0,
        "average_hours_per_person": round(month_hours / team_size, 1) if team_size else 0,
        "average_tasks_per_person": round(active_count / team_size, 1) if team_size else 0,
        "active_tasks": active_count,
        "completed_this_month": completed_count,
        "completion_rate": (
            round(completed_count / (active_count + completed_count) * 100, 1)
            if active_count + completed_count else 0
        ),
        "blocked_count": len(blocked),
        "blocked_tasks": blocked[:5],
        "in_progress_count": in_progress_count,
        "ready_for_prod_count": ready_count,
        "status_distribution": [
            {"status": status, "count": count} for status, count in statuses.most_common(5)
        ],
        "top_contributors": [
            {"username": name, "hours": hours}
            for name, hours in sorted(contributor_hours.items(), key=lambda item: item[1], reverse=True)[:5]
        ],
        "top_projects": [
            {"name": name, "active_tasks": count}
            for name, count in sorted(project_active.items(), key=lambda item: item[1], reverse=True)[:5]
        ],
        "deployments": {
            "this_month": _deployments(all_jiras, today.year, today.month),
            "next_month": _deployments(all_jiras, next_year, next_mon),
        },
        "upcoming_deadlines": deadlines,
        "stale_tasks": stale,
        "members": members,
    }
