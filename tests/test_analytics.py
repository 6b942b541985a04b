"""
Tests for personal and team analytics
"""
from datetime import date, datetime

from config import settings
from factories import make_jira, make_user
from services import analytics

TODAY = date(2024, 5, 15)


class TestJiraStats:
    """Headline counters."""

    def test_counts_and_hours(self):
        jiras = [
            make_jira("A-1", actual_status="Done", project_name="Alpha", due_date=date(2024, 5, 5),
                      created_at=datetime(2024, 5, 2),
                      logs=[(date(2024, 5, 15), 4), (date(2024, 5, 13), 3)]),
            make_jira("A-2", actual_status="In Progress", project_name="Beta", due_date=date(2024, 5, 10),
                      created_at=datetime(2024, 4, 1),
                      logs=[(date(2024, 4, 20), 6), (date(2024, 5, 14), 2)]),
            make_jira("A-3", actual_status="To Do", project_name="Alpha", created_at=datetime(2024, 5, 14)),
            make_jira("A-4", actual_status="Blocked", created_at=datetime(2024, 3, 1)),
        ]

        stats = analytics.jira_stats(jiras, TODAY)

        assert stats["total_jiras"] == 4
        assert (stats["completed"], stats["in_progress"], stats["todo"], stats["blocked"]) == (1, 1, 1, 1)
        assert stats["overdue"] == 1
        assert stats["total_hours"] == 15
        assert stats["average_hours"] == 3.75
        assert stats["completion_rate"] == 25
        assert stats["project_count"] == 2
        assert stats["this_month_jiras"] == 2
        assert stats["this_month_hours"] == 9
        assert stats["today_hours"] == 4
        assert stats["week_hours"] == 9
        assert stats["active_jiras"] == 3
        assert stats["done_jiras"] == 1

    def test_empty(self):
        stats = analytics.jira_stats([], TODAY)
        assert stats["total_jiras"] == 0
        assert stats["average_hours"] == 0
        assert stats["completion_rate"] == 0


class TestTeamMemberStats:
    """Core/non-core rollup of member hours."""

    def test_utilization_bands(self):
        members = [
            {"username": "alice", "type": "Core", "total_hours": 176},
            {"username": "bob", "type": "Non-Core", "total_hours": 44},
            {"username": "carol", "type": "Non-Core", "total_hours": 0},
        ]

        stats = analytics.team_member_stats(members, capacity=176)

        assert stats["core_members"] == 1
        assert stats["non_core_members"] == 2
        assert stats["core_hours"] == 176
        assert stats["non_core_hours"] == 44
        assert stats["average_utilization"] == 41.7
        assert stats["high_performers"] == ["alice"]
        assert stats["underutilized"] == ["bob", "carol"]
        assert stats["active_members"] == 2
        assert stats["inactive_members"] == 1


class TestBurndown:
    """Remaining tasks against the ideal line."""

    def _tasks(self):
        return [
            make_jira("B-1", actual_status="Done", created_at=datetime(2024, 5, 1),
                      updated_at=datetime(2024, 5, 3)),
            make_jira("B-2", actual_status="Done", created_at=datetime(2024, 5, 1),
                      updated_at=datetime(2024, 5, 12)),
            make_jira("B-3", actual_status="In Progress", created_at=datetime(2024, 5, 2)),
            make_jira("B-4", actual_status="To Do", created_at=datetime(2024, 5, 2)),
            make_jira("B-5", actual_status="Done", created_at=datetime(2024, 4, 2),
                      updated_at=datetime(2024, 5, 2)),
        ]

    def test_current_month_tasks_only(self):
        result = analytics.burndown(self._tasks(), TODAY)

        assert result["total"] == 4
        assert result["completed"] == 2
        assert result["remaining"] == 2
        assert len(result["points"]) == 31

    def test_points_stop_at_today(self):
        points = analytics.burndown(self._tasks(), TODAY)["points"]

        assert points[2]["remaining"] == 3
        assert points[14]["remaining"] == 2
        assert points[15]["remaining"] is None
        assert points[30]["ideal"] == 0

    def test_projection_uses_last_seven_days(self):
        result = analytics.burndown(self._tasks(), TODAY)

        assert result["daily_rate"] == 0.14
        assert result["projected_completion_date"] is not None
        assert result["on_track"] is True

    def test_no_projection_early_in_month(self):
        result = analytics.burndown(self._tasks(), date(2024, 5, 3))

        assert result["projected_completion_date"] is None
        assert result["daily_rate"] == 0


class TestWorkloadBalance:
    """Spread of monthly hours over projects and services."""

    def test_imbalance_detected(self):
        jiras = [
            make_jira("W-1", project_name="Alpha", actual_status="Done",
                      logs=[(date(2024, 5, 2), 6), (date(2024, 5, 3), 4), (date(2024, 4, 3), 9)]),
            make_jira("W-2", project_name="Beta", actual_status="In Progress",
                      logs=[(date(2024, 5, 6), 2)]),
            make_jira("W-3", project_name="Alpha", actual_status="To Do"),
        ]

        result = analytics.workload_balance(jiras, TODAY)

        assert result["total_hours"] == 12
        assert [p["name"] for p in result["projects"]] == ["Alpha", "Beta"]
        alpha = result["projects"][0]
        assert alpha["task_count"] == 1
        assert alpha["completion_rate"] == 100
        assert result["projects"][1]["active_tasks"] == 1
        assert result["project_balance"] == {"balance_ratio": 5.0, "is_imbalanced": True}

        assert result["services"][0]["name"] == "Unassigned"
        assert result["service_balance"]["is_imbalanced"] is False


class TestProductivityInsights:
    """Consistency, volume and streaks."""

    def _jiras(self):
        return [
            make_jira("P-1", actual_status="Done", created_at=datetime(2024, 5, 1),
                      updated_at=datetime(2024, 5, 5),
                      logs=[(date(2024, 5, 1), 8), (date(2024, 5, 2), 8), (date(2024, 5, 3), 4)]),
            make_jira("P-2", actual_status="In Progress",
                      logs=[(date(2024, 5, 13), 8), (date(2024, 5, 14), 8), (date(2024, 5, 15), 4)]),
        ]

    def test_score(self):
        result = analytics.productivity_insights(self._jiras(), TODAY)

        assert result["working_days"] == 11
        assert result["days_with_logs"] == 6
        assert result["consistency"] == 54.5
        assert result["hours_score"] == 83.3
        assert result["score"] == 66

    def test_streaks_and_best_days(self):
        result = analytics.productivity_insights(self._jiras(), TODAY)

        assert result["current_streak"] == 3
        assert result["longest_streak"] == 3
        assert result["most_productive_day"]["hours"] == 8
        assert result["most_productive_weekday"] == "Wednesday"
        assert result["average_completion_days"] == 4.0

    def test_holidays_reduce_expected_days(self):
        holidays = {date(2024, 5, 6), date(2024, 5, 7), date(2024, 5, 8), date(2024, 5, 9), date(2024, 5, 10)}
        result = analytics.productivity_insights(self._jiras(), TODAY, holidays)

        assert result["working_days"] == 6
        assert result["consistency"] == 100
        assert result["longest_streak"] == 6

    def test_no_logs(self):
        result = analytics.productivity_insights([], TODAY)

        assert result["score"] == 0
        assert result["most_productive_day"] is None
        assert result["most_productive_weekday"] is None


class TestMonthlySummary:
    """Current month against the previous one."""

    def test_changes(self):
        jiras = [
            make_jira("M-1", project_name="Alpha",
                      logs=[(date(2024, 5, 2), 5), (date(2024, 5, 3), 3), (date(2024, 4, 10), 4)]),
            make_jira("M-2", project_name="Beta", logs=[(date(2024, 5, 3), 2)]),
        ]

        result = analytics.monthly_summary(jiras, TODAY)

        assert result["current"]["total_hours"] == 10
        assert result["previous"]["total_hours"] == 4
        assert result["hours_change"] == 150.0
        assert result["tasks_change"] == 100.0
        assert result["days_change"] == 100.0
        assert result["top_project"] == {"name": "Alpha", "hours": 8}
        assert result["average_daily_hours"] == 5.0
        assert result["consistency"] == 9

    def test_previous_month_empty(self):
        jiras = [make_jira("M-1", logs=[(date(2024, 5, 2), 5)])]
        assert analytics.monthly_summary(jiras, TODAY)["hours_change"] == 100.0
        assert analytics.monthly_summary([], TODAY)["hours_change"] == 0.0


class TestLoggingTracker:
    """Per-day logging discipline."""

    def test_daily_statuses(self):
        jiras = [make_jira("L-1", logs=[(date(2024, 5, 1), 8), (date(2024, 5, 2), 3), (date(2024, 5, 3), 11)])]

        result = analytics.logging_tracker(jiras, TODAY, holidays={date(2024, 5, 6)})

        assert result["total_working_days"] == 22
        assert result["working_days_passed"] == 10
        assert result["remaining_working_days"] == 13
        statuses = {d["date"]: d["status"] for d in result["daily_analysis"]}
        assert len(statuses) == 10
        assert "2024-05-06" not in statuses
        assert statuses["2024-05-01"] == "good"
        assert statuses["2024-05-02"] == "low"
        assert statuses["2024-05-03"] == "high"
        assert statuses["2024-05-07"] == "missing"
        assert len(result["problem_days"]) == 8
        assert len(result["over_logged_days"]) == 1

    def test_totals_and_assessment(self):
        jiras = [make_jira("L-1", logs=[(date(2024, 5, 1), 8), (date(2024, 5, 2), 3), (date(2024, 5, 3), 11)])]

        result = analytics.logging_tracker(jiras, TODAY, holidays={date(2024, 5, 6)})

        assert result["total_hours_logged"] == 22
        assert result["expected_hours_to_date"] == 80
        assert result["hours_deficit"] == 58
        assert round(result["average_hours_per_remaining_day"], 2) == 11.85
        assert result["performance_ratio"] == 27.5
        assert result["assessment_message"].startswith("Are you taking it easy")

    def test_overworked_message(self):
        assert analytics.assessment_message(130, 10, 22).startswith("You're working too hard")


class TestDueSoon:
    """In-progress tasks close to their due date."""

    def test_window(self):
        jiras = [
            make_jira("D-1", actual_status="In Progress", due_date=date(2024, 5, 18)),
            make_jira("D-2", actual_status="In Progress", due_date=date(2024, 5, 15)),
            make_jira("D-3", actual_status="In Progress", due_date=date(2024, 5, 19)),
            make_jira("D-4", actual_status="In Progress", due_date=date(2024, 5, 14)),
            make_jira("D-5", actual_status="Done", due_date=date(2024, 5, 16)),
            make_jira("D-6", actual_status="In Progress"),
        ]

        result = analytics.due_soon(jiras, TODAY)

        assert [(r["jira_number"], r["days_remaining"]) for r in result] == [("D-2", 0), ("D-1", 3)]


class TestVelocity:
    """Weekly throughput per member."""

    def test_members_sorted_by_hours(self):
        alice, bob = make_user("alice"), make_user("bob")
        team_data = [
            {"user": bob, "jiras": [
                make_jira("V-2", actual_status="In Progress", logs=[(date(2024, 5, 15), 2)]),
            ]},
            {"user": alice, "jiras": [
                make_jira("V-1", actual_status="Done", updated_at=datetime(2024, 5, 14),
                          logs=[(date(2024, 5, 13), 4), (date(2024, 5, 11), 8)]),
            ]},
        ]

        result = analytics.velocity(team_data, TODAY)

        assert result["week_start"] == "2024-05-12"
        assert result["total_hours"] == 6
        assert result["total_completed"] == 1
        assert [m["username"] for m in result["members"]] == ["alice", "bob"]
        assert result["members"][0]["completion_rate"] == 100
        assert result["members"][1]["completion_rate"] == 0


def test_month_capacity():
    assert analytics.month_capacity(2024, 5) == 184
    assert analytics.month_capacity(2024, 5, {date(2024, 5, 1)}) == 176


def test_capacity_follows_configured_hours_per_day(monkeypatch):
    monkeypatch.setattr(settings.workload, "hours_per_day", 7)

    assert analytics.month_capacity(2024, 5) == 23 * 7
    assert analytics.team_member_stats([])["capacity_per_member"] == 22 * 7


def test_logging_bands_follow_configured_thresholds(monkeypatch):
    monkeypatch.setattr(settings.workload, "low_log_hours", 4)
    monkeypatch.setattr(settings.workload, "high_log_hours", 7)
    jiras = [make_jira("L-1", logs=[(date(2024, 5, 1), 5), (date(2024, 5, 2), 3), (date(2024, 5, 3), 8)])]

    statuses = {d["date"]: d["status"] for d in analytics.logging_tracker(jiras, TODAY)["daily_analysis"]}

    assert statuses["2024-05-01"] == "good"
    assert statuses["2024-05-02"] == "low"
    assert statuses["2024-05-03"] == "high"


class TestDeploymentHistory:
    """Past deployments across stages."""

    def _jiras(self):
        return [
            make_jira("H-1", project_name="Payments", deploy_sit_date=date(2024, 4, 20),
                      deploy_uat_date=date(2024, 5, 10), deploy_prod_date=date(2024, 5, 15)),
            make_jira("H-2", deploy_sit_date=date(2024, 5, 10), deploy_preprod_date=date(2024, 1, 10)),
            make_jira("H-3"),
        ]

    def test_newest_first_and_today_excluded(self):
        result = analytics.deployment_history(self._jiras(), TODAY)

        assert [(d["jira_number"], d["stage"], d["days_ago"]) for d in result["deployments"]] == [
            ("H-1", "UAT", 5),
            ("H-2", "SIT", 5),
            ("H-1", "SIT", 25),
            ("H-2", "PREPROD", 126),
        ]
        assert list(result["by_month"]) == ["May 2024", "April 2024", "January 2024"]
        assert result["stage_counts"] == {"UAT": 1, "SIT": 2, "PREPROD": 1}
        assert result["deployments"][1]["project_name"] == "Unknown Project"
        assert result["deployments"][0]["stage_order"] == 2

    def test_look_back_window(self):
        result = analytics.deployment_history(self._jiras(), TODAY, days=30)

        assert len(result["deployments"]) == 3
        assert result["projects"] == ["Payments"]


class TestUpcomingDeployments:
    """Two-week deployment schedule."""

    def test_buckets(self):
        jiras = [
            make_jira("U-1", deploy_sit_date=date(2024, 5, 15), deploy_uat_date=date(2024, 5, 16),
                      deploy_preprod_date=date(2024, 5, 19), deploy_prod_date=date(2024, 5, 20)),
            make_jira("U-2", deploy_sit_date=date(2024, 5, 30), deploy_uat_date=date(2024, 5, 14),
                      deploy_prod_date=date(2024, 5, 17)),
        ]

        result = analytics.upcoming_deployments(jiras, TODAY)

        assert [(d["jira_number"], d["stage"]) for d in result["today"]] == [("U-1", "SIT")]
        assert [(d["jira_number"], d["stage"]) for d in result["tomorrow"]] == [("U-1", "UAT")]
        assert [(d["jira_number"], d["stage"]) for d in result["this_week"]] == [("U-2", "PROD"), ("U-1", "PREPROD")]
        assert [d["days_remaining"] for d in result["next_week"]] == [5]
        assert result["total"] == 5
