"""
Workload alerts for team leads and IT leads
"""
from collections import defaultdict
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from config import settings
from models.alerts import Alert, AlertSeverity, AlertType, sort_alerts
from services.working_days import daily_hours, in_month, working_days_passed
from utils.logging import get_logger

logger = get_logger(__name__)

FULL_MONTH_WORKING_DAYS = 22

PERFORMANCE_INACTIVE = ("done", "closed", "cancelled", "deployed")
BLOCKED_KEYWORDS = ("block", "wait", "hold")


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def team_performance_alerts(team_data: Iterable[Dict[str, Any]], today: date,
                            holidays: Iterable[date] = ()) -> List[Alert]:
    """Alerts for a team lead based on the current month.

    ``team_data`` items are ``{"user": User, "jiras": [Jira, ...]}``.
    """
    team_data = list(team_data)
    if not team_data:
        return []

    days_passed = working_days_passed(today, holidays)
    total_active = 0
    completed_this_month = 0
    total_hours = 0.0
    blocked = []
    member_stats: Dict[str, Dict[str, Any]] = {}

    for entry in team_data:
        username = entry["user"].username
        stats = member_stats.setdefault(username, {"active_tasks": 0, "hours": 0.0, "last_activity": None})

        for jira in entry["jiras"]:
            status = (jira.actual_status or "").lower()
            if not any(keyword in status for keyword in PERFORMANCE_INACTIVE):
                total_active += 1
                stats["active_tasks"] += 1
                if any(keyword in status for keyword in BLOCKED_KEYWORDS):
                    touched = _as_date(jira.updated_at or jira.created_at)
                    blocked.append((today - touched).days if touched else 0)
            elif jira.updated_at is not None and in_month(_as_date(jira.updated_at), today.year, today.month):
                completed_this_month += 1

            for log in jira.daily_logs:
                if in_month(log.log_date, today.year, today.month):
                    stats["hours"] += float(log.time_spent or 0)
                    total_hours += float(log.time_spent or 0)
                    if stats["last_activity"] is None or log.log_date > stats["last_activity"]:
                        stats["last_activity"] = log.log_date

    team_size = len(member_stats)
    expected = days_passed * daily_hours() * team_size
    utilization = total_hours / expected * 100 if expected else 0
    alerts = []

    if utilization < 60:
        alerts.append(Alert(
            id="low_utilization", type=AlertType.WARNING, priority=AlertSeverity.HIGH,
            title="Low Team Utilization",
            message=f"Team utilization is {utilization:.0f}% (expected 80%+)",
            details=f"Only {total_hours:.0f} hours logged out of {expected:g} expected hours this month",
        ))
    if utilization > 110:
        alerts.append(Alert(
            id="high_utilization", type=AlertType.INFO, priority=AlertSeverity.MEDIUM,
            title="High Team Utilization",
            message=f"Team utilization is {utilization:.0f}% (over capacity)",
            details="Consider workload redistribution or additional resources",
        ))
    if blocked:
        old_blocked = sum(1 for days in blocked if days > 3)
        alerts.append(Alert(
            id="blocked_tasks", type=AlertType.WARNING, priority=AlertSeverity.HIGH,
            title="Blocked Tasks Detected",
            message=f"{len(blocked)} blocked tasks, {old_blocked} over 3 days old",
            details="Review blocked tasks and remove impediments",
        ))

    task_counts = [stats["active_tasks"] for stats in member_stats.values()]
    if team_size > 1 and max(task_counts) - min(task_counts) > 5:
        alerts.append(Alert(
            id="uneven_workload", type=AlertType.INFO, priority=AlertSeverity.MEDIUM,
            title="Uneven Workload Distribution",
            message=f"Task distribution varies from {min(task_counts)} to {max(task_counts)} per person",
            details="Consider rebalancing tasks across team members",
        ))

    per_day = completed_this_month / days_passed if days_passed else 0
    if per_day < 1 and days_passed > 5:
        alerts.append(Alert(
            id="low_productivity", type=AlertType.WARNING, priority=AlertSeverity.MEDIUM,
            title="Low Completion Rate",
            message=f"Only {per_day:.1f} tasks completed per day",
            details="Review process efficiency and remove bottlenecks",
        ))

    for username, stats in member_stats.items():
        if stats["last_activity"] is None:
            continue
        idle = (today - stats["last_activity"]).days
        if idle > settings.workload.inactive_member_days:
            alerts.append(Alert(
                id=f"inactive_{username}", type=AlertType.INFO, priority=AlertSeverity.LOW,
                title="Inactive Team Member",
                message=f"{username} hasn't logged time in {idle} days",
                details="Check if assistance is needed or if there are blockers",
            ))

    if 80 <= utilization <= 100 and not blocked:
        alerts.append(Alert(
            id="good_performance", type=AlertType.SUCCESS, priority=AlertSeverity.LOW,
            title="Team Performance On Track",
            message=f"Great job! {utilization:.0f}% utilization with no blocked tasks",
            details="Continue maintaining this performance level",
        ))

    logger.debug("Computed team alerts", team_size=team_size, alerts=len(alerts))
    return sort_alerts(alerts)


def _team_rates(individuals: List[Dict[str, Any]], capacity: float) -> Dict[str, List[float]]:
    rates: Dict[str, List[float]] = defaultdict(list)
    for member in individuals:
        team_name = member["user"].get("team_name") or "Unassigned"
        rates[team_name].append(member["total_hours"] / capacity * 100 if capacity else 0)
    return rates


def _display_name(user: Dict[str, Any]) -> str:
    return user.get("name") or user.get("username")


def it_lead_alerts(summary: Dict[str, Any], capacity: Optional[float] = None) -> List[Alert]:
    """Cross-team alerts over an IT lead summary (see ``services.reporting``)"""
    if capacity is None:
        capacity = FULL_MONTH_WORKING_DAYS * daily_hours()
    alerts = []
    individuals = summary.get("individual_summary") or []

    team_hours: Dict[str, float] = defaultdict(float)
    for member in individuals:
        team_hours[member["user"].get("team_name") or "Unassigned"] += member["total_hours"]

    for team_name, rates in _team_rates(individuals, capacity).items():
        average = sum(rates) / len(rates)
        if average > 120:
            alerts.append(Alert(
                id=f"overutil_{team_name}", type=AlertType.CRITICAL, priority=AlertSeverity.CRITICAL,
                title="Team Over-Capacity",
                message=f"{team_name} team at {average:.0f}% capacity",
                details=f"{len(rates)} members averaging {team_hours[team_name] / len(rates):.1f}h each",
                action="Redistribute workload or add resources",
                team_name=team_name,
            ))
        elif average < 60:
            alerts.append(Alert(
                id=f"underutil_{team_name}", type=AlertType.WARNING, priority=AlertSeverity.MEDIUM,
                title="Team Under-Utilized",
                message=f"{team_name} team at {average:.0f}% capacity",
                details="Opportunity to take on more work or redistribute tasks",
                action="Consider additional project assignments",
                team_name=team_name,
            ))

    projects = [project for group in summary.get("project_summary") or [] for project in group["projects"]]
    project_total = sum(project["total_hours"] for project in projects)
    if project_total > 0:
        for project in sorted(projects, key=lambda p: p["total_hours"], reverse=True)[:3]:
            concentration = project["total_hours"] / project_total * 100
            if concentration > 40:
                alerts.append(Alert(
                    id=f"concentration_{project['name']}", type=AlertType.WARNING, priority=AlertSeverity.MEDIUM,
                    title="High Resource Concentration",
                    message=f"{project['name']} consumes {concentration:.0f}% of total resources",
                    details=f"{project['total_hours']:.1f} hours out of {project_total:.1f} total",
                    action="Monitor project risk and resource dependencies",
                ))

    core_hours = sum(m["total_hours"] for m in individuals if m["user"].get("type") == "Core")
    non_core_hours = sum(m["total_hours"] for m in individuals if m["user"].get("type") == "Non-Core")
    if core_hours + non_core_hours > 0:
        core_ratio = core_hours / (core_hours + non_core_hours) * 100
        if core_ratio > 70:
            alerts.append(Alert(
                id="core_heavy", type=AlertType.INFO, priority=AlertSeverity.LOW,
                title="Core-Heavy Resource Allocation",
                message=f"{core_ratio:.0f}% of effort from core team",
                details="Consider leveraging non-core resources for suitable tasks",
                action="Review task distribution strategy",
            ))
        elif core_ratio < 30:
            alerts.append(Alert(
                id="noncore_heavy", type=AlertType.INFO, priority=AlertSeverity.LOW,
                title="Non-Core Heavy Resource Allocation",
                message=f"{100 - core_ratio:.0f}% of effort from non-core team",
                details="Ensure knowledge transfer and core oversight",
                action="Monitor quality and knowledge management",
            ))

    hours = [m["total_hours"] for m in individuals]
    average_hours = sum(hours) / len(hours) if hours else 0
    if average_hours > 0:
        for member in individuals:
            deviation = abs(member["total_hours"] - average_hours) / average_hours * 100
            if deviation <= 50:
                continue
            user = member["user"]
            if member["total_hours"] == max(hours):
                alerts.append(Alert(
                    id=f"overwork_{user.get('id')}", type=AlertType.WARNING, priority=AlertSeverity.MEDIUM,
                    title="Potential Overwork Risk",
                    message=f"{_display_name(user)} logged {member['total_hours']:.1f}h",
                    details=f"{deviation:.0f}% above team average ({average_hours:.1f}h)",
                    action="Check workload and well-being",
                ))
            elif member["total_hours"] == min(hours):
                alerts.append(Alert(
                    id=f"underwork_{user.get('id')}", type=AlertType.INFO, priority=AlertSeverity.LOW,
                    title="Low Activity Member",
                    message=f"{_display_name(user)} logged {member['total_hours']:.1f}h",
                    details=f"{deviation:.0f}% below team average",
                    action="Check availability and assignment status",
                ))

    if not alerts:
        alerts.append(Alert(
            id="all_good", type=AlertType.SUCCESS, priority=AlertSeverity.INFO,
            title="Operations Running Smoothly",
            message="All teams operating within optimal parameters",
            details="Resource utilization and workload distribution look healthy",
            action="Continue monitoring for trends",
        ))

    return sort_alerts(alerts)


def _member_status(utilization: float) -> str:
    if utilization > 120:
        return "over"
    if utilization < 60:
        return "under"
    if utilization > 100:
        return "high"
    return "normal"


def resource_heatmap(summary: Dict[str, Any], capacity: Optional[float] = None) -> List[Dict[str, Any]]:
    """Per-team utilization cells, highest average first"""
    if capacity is None:
        capacity = FULL_MONTH_WORKING_DAYS * daily_hours()
    teams: Dict[str, Dict[str, Any]] = {}

    for member in summary.get("individual_summary") or []:
        user = member["user"]
        team_name = user.get("team_name") or "Unassigned"
        utilization = member["total_hours"] / capacity * 100 if capacity else 0
        team = teams.setdefault(team_name, {
            "team_name": team_name,
            "members": [],
            "total_hours": 0.0,
            "member_count": 0,
            "avg_utilization": 0.0,
            "max_utilization": 0.0,
            "min_utilization": 100.0,
            "core_members": 0,
            "non_core_members": 0,
            "over_capacity": 0,
            "under_utilized": 0,
        })
        team["members"].append({
            "user": user,
            "total_hours": member["total_hours"],
            "utilization": round(utilization, 1),
            "status": _member_status(utilization),
        })
        team["total_hours"] += member["total_hours"]
        team["member_count"] += 1
        team["max_utilization"] = max(team["max_utilization"], round(utilization, 1))
        team["min_utilization"] = min(team["min_utilization"], round(utilization, 1))
        if user.get("type") == "Core":
            team["core_members"] += 1
        else:
            team["non_core_members"] += 1
        if utilization > 120:
            team["over_capacity"] += 1
        elif utilization < 60:
            team["under_utilized"] += 1

    for team in teams.values():
        team["avg_utilization"] = round(team["total_hours"] / (team["member_count"] * capacity) * 100, 1) if capacity else 0

    return sorted(teams.values(), key=lambda t: t["avg_utilization"], reverse=True)
