"""
Personal and team analytics computed from tasks and daily logs

Every function here is pure: it receives tasks (``Jira`` rows or objects with
the same attributes) and an explicit ``today`` so results are reproducible.
"""
import calendar
import math
from collections import Counter, defaultdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from config import settings
from models.jira import DEPLOY_DATE_FIELDS
from services.working_days import (
    daily_hours,
    in_month,
    is_working_day,
    previous_month,
    remaining_working_days,
    week_start,
    working_days_in_month,
    working_days_passed,
)

FULL_MONTH_WORKING_DAYS = 22
HIGH_PERFORMER_UTILIZATION = 80
UNDERUTILIZED_UTILIZATION = 50
IMBALANCE_RATIO = 3
PROJECTION_WINDOW = 7
UPCOMING_DEPLOY_WINDOW = 14


def _status(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def is_done(jira) -> bool:
    return _status(jira.actual_status) == "done"


def is_closed(jira) -> bool:
    return _status(jira.actual_status) in ("done", "closed")


def _percent(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole else 0


def _logs(jiras: Iterable) -> List:
    return [log for jira in jiras for log in jira.daily_logs]


def _month_logs(jiras: Iterable, year: int, month: int) -> List:
    return [log for log in _logs(jiras) if in_month(log.log_date, year, month)]


def _hours(logs: Iterable) -> float:
    return sum(float(log.time_spent or 0) for log in logs)


def jira_stats(jiras: Iterable, today: date) -> Dict[str, Any]:
    """Headline counters for a user's task list"""
    jiras = list(jiras)
    total = len(jiras)
    statuses = [_status(j.actual_status) for j in jiras]

    completed = statuses.count("done")
    in_progress = statuses.count("in progress")
    todo = sum(1 for s in statuses if s in ("to do", "open"))
    blocked = sum(1 for s in statuses if s in ("blocked", "impediment"))
    overdue = sum(
        1 for j in jiras
        if j.due_date is not None and j.due_date < today and not is_done(j)
    )

    logs = _logs(jiras)
    total_hours = _hours(logs)
    this_week = week_start(today)

    return {
        "total_jiras": total,
        "completed": completed,
        "in_progress": in_progress,
        "todo": todo,
        "blocked": blocked,
        "overdue": overdue,
        "total_hours": total_hours,
        "average_hours": total_hours / total if total else 0,
        "completion_rate": round(_percent(completed, total)),
        "project_count": len({j.project_name for j in jiras if j.project_name}),
        "this_month_jiras": sum(1 for j in jiras if in_month(_as_date(j.created_at), today.year, today.month)),
        "this_month_hours": _hours(_month_logs(jiras, today.year, today.month)),
        "today_hours": _hours(log for log in logs if log.log_date == today),
        "week_hours": _hours(log for log in logs if this_week <= log.log_date <= today),
        "active_jiras": sum(1 for j in jiras if not is_closed(j)),
        "done_jiras": sum(1 for j in jiras if is_closed(j)),
    }


def team_member_stats(members: Iterable[Dict[str, Any]],
                      capacity: Optional[float] = None) -> Dict[str, Any]:
    """Summarize member rows of the form ``{"username", "type", "total_hours"}``"""
    if capacity is None:
        capacity = FULL_MONTH_WORKING_DAYS * daily_hours()
    members = list(members)
    core = [m for m in members if m.get("type") == "Core"]
    non_core = [m for m in members if m.get("type") != "Core"]
    total_hours = sum(m.get("total_hours", 0) for m in members)

    utilizations = {m.get("username"): _percent(m.get("total_hours", 0), capacity) for m in members}
    average = sum(utilizations.values()) / len(members) if members else 0

    return {
        "total_members": len(members),
        "core_members": len(core),
        "non_core_members": len(non_core),
        "total_hours": total_hours,
        "core_hours": sum(m.get("total_hours", 0) for m in core),
        "non_core_hours": sum(m.get("total_hours", 0) for m in non_core),
        "capacity_per_member": capacity,
        "average_utilization": round(average, 1),
        "high_performers": [name for name, u in utilizations.items() if u >= HIGH_PERFORMER_UTILIZATION],
        "underutilized": [name for name, u in utilizations.items() if u < UNDERUTILIZED_UTILIZATION],
        "active_members": sum(1 for m in members if m.get("total_hours", 0) > 0),
        "inactive_members": sum(1 for m in members if not m.get("total_hours", 0)),
    }


def burndown(jiras: Iterable, today: date) -> Dict[str, Any]:
    """Remaining tasks of the current month against the ideal straight line"""
    tasks = [j for j in jiras if in_month(_as_date(j.created_at), today.year, today.month)]
    total = len(tasks)
    days_in_month = calendar.monthrange(today.year, today.month)[1]

    points = []
    for day in range(1, days_in_month + 1):
        current = date(today.year, today.month, day)
        ideal = max(0.0, total - (total / days_in_month) * day)
        point = {"date": current.isoformat(), "day": day, "ideal": round(ideal, 2),
                 "remaining": None, "completed": None}
        if current <= today:
            completed = sum(
                1 for j in tasks
                if is_done(j) and j.updated_at is not None and _as_date(j.updated_at) <= current
            )
            point["completed"] = completed
            point["remaining"] = total - completed
        points.append(point)

    actual = [p for p in points if p["remaining"] is not None]
    remaining = actual[-1]["remaining"] if actual else total
    completed = total - remaining

    projected_date = None
    daily_rate = 0.0
    if len(actual) >= PROJECTION_WINDOW:
        window = actual[-PROJECTION_WINDOW:]
        daily_rate = (window[-1]["completed"] - window[0]["completed"]) / PROJECTION_WINDOW
        if daily_rate > 0 and remaining > 0:
            projected_date = (today + timedelta(days=math.ceil(remaining / daily_rate))).isoformat()

    ideal_today = actual[-1]["ideal"] if actual else total

    return {
        "total": total,
        "completed": completed,
        "remaining": remaining,
        "daily_rate": round(daily_rate, 2),
        "projected_completion_date": projected_date,
        "on_track": remaining <= ideal_today,
        "points": points,
    }


def _workload_rows(jiras: List, logs_by_jira: Dict, attr: str) -> List[Dict[str, Any]]:
    rows: Dict[str, Dict[str, Any]] = {}
    for jira in jiras:
        hours = logs_by_jira.get(jira.id, 0.0)
        if not hours:
            continue
        name = getattr(jira, attr) or "Unassigned"
        row = rows.setdefault(name, {"name": name, "hours": 0.0, "task_count": 0,
                                     "active_tasks": 0, "completed_tasks": 0})
        row["hours"] += hours
        row["task_count"] += 1
        if _status(jira.actual_status) == "in progress":
            row["active_tasks"] += 1
        elif is_done(jira):
            row["completed_tasks"] += 1

    for row in rows.values():
        row["avg_hours_per_task"] = row["hours"] / row["task_count"] if row["task_count"] else 0
        row["completion_rate"] = round(_percent(row["completed_tasks"], row["task_count"]))

    return sorted(rows.values(), key=lambda r: r["hours"], reverse=True)[:5]


def _balance(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    hours = [r["hours"] for r in rows]
    if not hours:
        return {"balance_ratio": 0, "is_imbalanced": False}
    highest, lowest = max(hours), min(hours)
    ratio = highest / lowest if highest > 0 and lowest > 0 else 0
    return {
        "balance_ratio": round(ratio, 2),
        "is_imbalanced": highest / (lowest or 1) > IMBALANCE_RATIO,
    }


def workload_balance(jiras: Iterable, today: date) -> Dict[str, Any]:
    """How this month's hours spread over projects and services"""
    jiras = list(jiras)
    logs_by_jira: Dict[Any, float] = defaultdict(float)
    for jira in jiras:
        logs_by_jira[jira.id] += _hours(
            log for log in jira.daily_logs if in_month(log.log_date, today.year, today.month)
        )

    projects = _workload_rows(jiras, logs_by_jira, "project_name")
    services = _workload_rows(jiras, logs_by_jira, "service_name")

    return {
        "total_hours": sum(logs_by_jira.values()),
        "projects": projects,
        "services": services,
        "project_balance": _balance(projects),
        "service_balance": _balance(services),
    }


def _streaks(logged_days: set, start: date, today: date, holidays: set) -> Dict[str, int]:
    longest = current = 0
    day = start
    while day <= today:
        if is_working_day(day, holidays):
            if day in logged_days:
                current += 1
                longest = max(longest, current)
            elif day != today:
                current = 0
        day += timedelta(days=1)
    return {"current_streak": current, "longest_streak": longest}


def productivity_insights(jiras: Iterable, today: date, holidays: Iterable[date] = ()) -> Dict[str, Any]:
    """Consistency and volume based score for the current month.

    ``score = 0.6 * consistency + 0.4 * hours_score`` where consistency is
    the share of elapsed working days with at least one log and the hours
    score compares the average logged day to a full working day.
    """
    holidays = set(holidays)
    jiras = list(jiras)
    logs = [log for log in _month_logs(jiras, today.year, today.month) if log.log_date <= today]

    hours_by_day: Dict[date, float] = defaultdict(float)
    for log in logs:
        hours_by_day[log.log_date] += float(log.time_spent or 0)
    logged_days = {day for day, hours in hours_by_day.items() if hours > 0}

    working_days = working_days_passed(today, holidays)
    consistency = min(100.0, _percent(len(logged_days), working_days))
    total_hours = sum(hours_by_day.values())
    average_daily = total_hours / len(logged_days) if logged_days else 0
    hours_score = min(100.0, average_daily / daily_hours() * 100)

    weekday_hours = {name: 0.0 for name in calendar.day_name}
    for day, hours in hours_by_day.items():
        weekday_hours[calendar.day_name[day.weekday()]] += hours

    best_day = max(hours_by_day.items(), key=lambda item: item[1]) if hours_by_day else None
    best_weekday = max(weekday_hours.items(), key=lambda item: item[1]) if total_hours else None

    completion_days = [
        (_as_date(j.updated_at) - _as_date(j.created_at)).days
        for j in jiras
        if is_done(j) and j.updated_at is not None and j.created_at is not None
    ]

    return {
        "score": round(0.6 * consistency + 0.4 * hours_score),
        "consistency": round(consistency, 1),
        "hours_score": round(hours_score, 1),
        "working_days": working_days,
        "days_with_logs": len(logged_days),
        "total_hours": total_hours,
        "average_daily_hours": round(average_daily, 2),
        **_streaks(logged_days, today.replace(day=1), today, holidays),
        "most_productive_day": (
            {"date": best_day[0].isoformat(), "hours": best_day[1]} if best_day else None
        ),
        "most_productive_weekday": best_weekday[0] if best_weekday else None,
        "weekday_hours": weekday_hours,
        "average_completion_days": (
            round(sum(completion_days) / len(completion_days), 1) if completion_days else None
        ),
    }


def _change(current: float, previous: float) -> float:
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 1)


def _month_totals(jiras: List, year: int, month: int) -> Dict[str, Any]:
    hours = 0.0
    days = set()
    task_ids = set()
    project_hours: Dict[str, float] = defaultdict(float)
    for jira in jiras:
        for log in jira.daily_logs:
            if not in_month(log.log_date, year, month):
                continue
            spent = float(log.time_spent or 0)
            hours += spent
            days.add(log.log_date)
            task_ids.add(jira.id)
            project_hours[jira.project_name or "Unknown Project"] += spent
    return {
        "total_hours": hours,
        "days_logged": len(days),
        "tasks_worked": len(task_ids),
        "project_hours": dict(project_hours),
    }


def monthly_summary(jiras: Iterable, today: date) -> Dict[str, Any]:
    """Current month compared with the previous one"""
    jiras = list(jiras)
    current = _month_totals(jiras, today.year, today.month)
    prev_year, prev_month = previous_month(today.year, today.month)
    previous = _month_totals(jiras, prev_year, prev_month)

    top_project = None
    if current["project_hours"]:
        name, hours = max(current["project_hours"].items(), key=lambda item: item[1])
        top_project = {"name": name, "hours": hours}

    completed = sum(
        1 for j in jiras
        if is_done(j) and j.updated_at is not None and in_month(_as_date(j.updated_at), today.year, today.month)
    )

    return {
        "month": f"{today.year}-{today.month:02d}",
        "current": current,
        "previous": previous,
        "hours_change": _change(current["total_hours"], previous["total_hours"]),
        "tasks_change": _change(current["tasks_worked"], previous["tasks_worked"]),
        "days_change": _change(current["days_logged"], previous["days_logged"]),
        "completed_tasks": completed,
        "top_project": top_project,
        "average_daily_hours": (
            round(current["total_hours"] / current["days_logged"], 2) if current["days_logged"] else 0
        ),
        "consistency": round(_percent(current["days_logged"], FULL_MONTH_WORKING_DAYS)),
    }


def _day_status(hours: float) -> Dict[str, str]:
    if hours == 0:
        return {"status": "missing", "message": "No logs"}
    if hours < settings.workload.low_log_hours:
        return {"status": "low", "message": "Under-logged"}
    if hours > settings.workload.high_log_hours:
        return {"status": "high", "message": "Over-logged"}
    return {"status": "good", "message": "Good"}


def assessment_message(performance_ratio: float, days_passed: int, total_days: int) -> str:
    expected_progress = days_passed / total_days if total_days else 0
    actual_vs_expected = performance_ratio / 100 / expected_progress if expected_progress else 0

    if performance_ratio >= 120:
        return "You're working too hard! Take some time to rest and relax."
    if actual_vs_expected >= 1.1:
        return "Impressive! You're exceeding expectations. Can we get this energy next month too?"
    if actual_vs_expected >= 1.0:
        return "Perfect! You've hit your target. Keep up the excellent work!"
    if actual_vs_expected >= 0.95:
        return "Almost there! Just a little more push and you'll reach the goal. You got this!"
    if actual_vs_expected >= 0.85:
        return "Good progress! Stay focused and you'll catch up in no time."
    if actual_vs_expected >= 0.7:
        return "Time to step up the game! The month isn't over yet, you can still make it count."
    if actual_vs_expected >= 0.5:
        return "Are you taking it easy this month? Looks like you could take on more work!"
    return "Too chill this month? Time to wake up and show what you're capable of!"


def logging_tracker(jiras: Iterable, today: date, holidays: Iterable[date] = ()) -> Dict[str, Any]:
    """Day-by-day logging discipline for the current month"""
    holidays = set(holidays)
    hours_by_day: Dict[date, float] = defaultdict(float)
    for log in _month_logs(list(jiras), today.year, today.month):
        hours_by_day[log.log_date] += float(log.time_spent or 0)

    total_days = working_days_in_month(today.year, today.month, holidays)
    days_passed = working_days_passed(today, holidays)
    days_remaining = remaining_working_days(today, holidays)
    standard_hours = total_days * daily_hours()
    expected_to_date = days_passed * daily_hours()
    total_logged = sum(hours_by_day.values())

    daily = []
    for day in range(1, today.day + 1):
        current = date(today.year, today.month, day)
        if not is_working_day(current, holidays):
            continue
        hours = hours_by_day.get(current, 0.0)
        daily.append({"date": current.isoformat(), "day": day, "hours_logged": hours, **_day_status(hours)})

    performance_ratio = _percent(total_logged, expected_to_date)

    return {
        "total_working_days": total_days,
        "working_days_passed": days_passed,
        "remaining_working_days": days_remaining,
        "standard_hours_per_month": standard_hours,
        "expected_hours_to_date": expected_to_date,
        "total_hours_logged": total_logged,
        "hours_deficit": expected_to_date - total_logged,
        "average_hours_per_remaining_day": (
            (standard_hours - total_logged) / days_remaining if days_remaining > 0 else 0
        ),
        "performance_ratio": round(performance_ratio, 1),
        "daily_analysis": daily,
        "problem_days": [d for d in daily if d["status"] in ("missing", "low")],
        "over_logged_days": [d for d in daily if d["status"] == "high"],
        "current_day": today.day,
        "assessment_message": assessment_message(performance_ratio, days_passed, total_days),
    }


def due_soon(jiras: Iterable, today: date, days: int = 3) -> List[Dict[str, Any]]:
    """In-progress tasks due within ``days`` days, nearest first"""
    upcoming = []
    for jira in jiras:
        if _status(jira.actual_status) != "in progress" or jira.due_date is None:
            continue
        remaining = (jira.due_date - today).days
        if 0 <= remaining <= days:
            upcoming.append({
                "id": str(jira.id),
                "jira_number": jira.jira_number,
                "description": jira.description,
                "project_name": jira.project_name,
                "due_date": jira.due_date.isoformat(),
                "days_remaining": remaining,
            })
    return sorted(upcoming, key=lambda item: item["days_remaining"])


def velocity(team_data: Iterable[Dict[str, Any]], today: date) -> Dict[str, Any]:
    """Tasks and hours per member for the week containing ``today``.

    ``team_data`` items are ``{"user": User, "jiras": [Jira, ...]}``.
    """
    start = week_start(today)
    members = []
    for entry in team_data:
        user = entry["user"]
        worked = set()
        hours = 0.0
        for jira in entry["jiras"]:
            for log in jira.daily_logs:
                if start <= log.log_date <= today:
                    hours += float(log.time_spent or 0)
                    worked.add(jira.id)
        completed = sum(
            1 for j in entry["jiras"]
            if is_done(j) and j.updated_at is not None and start <= _as_date(j.updated_at) <= today
        )
        members.append({
            "user_id": str(user.id),
            "username": user.username,
            "tasks_worked": len(worked),
            "tasks_completed": completed,
            "hours": hours,
            "completion_rate": round(_percent(completed, len(worked))),
        })

    members.sort(key=lambda m: m["hours"], reverse=True)
    return {
        "week_start": start.isoformat(),
        "week_end": today.isoformat(),
        "total_hours": sum(m["hours"] for m in members),
        "total_completed": sum(m["tasks_completed"] for m in members),
        "members": members,
    }


def _deployments(jiras: Iterable):
    """Yield ``(jira, stage, stage_order, date)`` for every recorded deploy date"""
    for jira in jiras:
        for order, (stage, field) in enumerate(DEPLOY_DATE_FIELDS.items(), start=1):
            deploy_date = _as_date(getattr(jira, field))
            if deploy_date is not None:
                yield jira, stage, order, deploy_date


def _deployment_entry(jira, stage: str, order: int, deploy_date: date) -> Dict[str, Any]:
    return {
        "jira_id": str(jira.id),
        "jira_number": jira.jira_number,
        "description": jira.description,
        "stage": stage,
        "stage_order": order,
        "date": deploy_date.isoformat(),
        "project_name": jira.project_name or "Unknown Project",
        "service_name": jira.service_name,
        "actual_status": jira.actual_status,
        "env_detail": jira.env_detail,
        "sql_detail": jira.sql_detail,
    }


def deployment_history(jiras: Iterable, today: date, days: Optional[int] = None) -> Dict[str, Any]:
    """Deployments before ``today``, newest first.

    ``days`` keeps only deployments at most that many days old. Entries are
    also grouped by ``"<Month> <year>"`` in the same order.
    """
    jiras = list(jiras)
    entries = []
    for jira, stage, order, deploy_date in _deployments(jiras):
        days_ago = (today - deploy_date).days
        if days_ago <= 0 or (days is not None and days_ago > days):
            continue
        entry = _deployment_entry(jira, stage, order, deploy_date)
        entry["days_ago"] = days_ago
        entries.append((deploy_date, entry))

    entries.sort(key=lambda item: item[0], reverse=True)

    by_month: Dict[str, List[Dict[str, Any]]] = {}
    for deploy_date, entry in entries:
        label = f"{calendar.month_name[deploy_date.month]} {deploy_date.year}"
        by_month.setdefault(label, []).append(entry)

    return {
        "deployments": [entry for _, entry in entries],
        "by_month": by_month,
        "stage_counts": dict(Counter(entry["stage"] for _, entry in entries)),
        "projects": sorted({j.project_name for j in jiras if j.project_name}),
    }


def upcoming_deployments(jiras: Iterable, today: date,
                         window: int = UPCOMING_DEPLOY_WINDOW) -> Dict[str, Any]:
    """Deployments in the next ``window`` days bucketed into a schedule"""
    end_of_week = week_start(today) + timedelta(days=7)
    schedule: Dict[str, List] = {"today": [], "tomorrow": [], "this_week": [], "next_week": []}

    for jira, stage, order, deploy_date in _deployments(jiras):
        remaining = (deploy_date - today).days
        if not 0 <= remaining <= window:
            continue
        entry = _deployment_entry(jira, stage, order, deploy_date)
        entry["days_remaining"] = remaining

        if remaining == 0:
            bucket = "today"
        elif remaining == 1:
            bucket = "tomorrow"
        elif deploy_date <= end_of_week:
            bucket = "this_week"
        else:
            bucket = "next_week"
        schedule[bucket].append(entry)

    for entries in schedule.values():
        entries.sort(key=lambda e: (e["date"], e["stage_order"]))

    schedule["total"] = sum(len(entries) for entries in schedule.values())
    return schedule



def month_capacity(year: int, month: int, holidays: Iterable[date] = ()) -> float:
    """Full-month working hours for one person"""
    return working_days_in_month(year, month, holidays) * daily_hours()
