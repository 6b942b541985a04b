"""
API tests for the personal dashboard
"""
from datetime import date, timedelta

import pytest

from factories import auth, create_jira, create_user


@pytest.fixture
def alice(db_session):
    user = create_user(db_session, "alice")
    today = date.today()
    create_jira(db_session, user, "ABC-1", project_name="Alpha", actual_status="In Progress",
                due_date=today + timedelta(days=1), logs=[(today, 5)])
    create_jira(db_session, user, "ABC-2", project_name="Beta", actual_status="Done", logs=[(today, 2)])
    return user


@pytest.fixture
def bob(db_session):
    user = create_user(db_session, "bob")
    create_jira(db_session, user, "XYZ-9", actual_status="In Progress", logs=[(date.today(), 8)])
    return user


class TestDashboard:
    """Analytics over the caller's own tasks."""

    def test_stats(self, client, alice, bob):
        stats = client.get("/api/dashboard/stats", headers=auth(alice)).json()

        assert stats["total_jiras"] == 2
        assert stats["completed"] == 1
        assert stats["total_hours"] == 7
        assert stats["today_hours"] == 7

    def test_grouped(self, client, alice):
        body = client.get("/api/dashboard/grouped?view=project", headers=auth(alice)).json()

        today = date.today()
        items = body["grouped"][str(today.year)][f"{today.month:02d}"]
        assert sorted(i["name"] for i in items) == ["Alpha", "Beta"]
        assert body["month_used_hours"][f"{today.year}-{today.month:02d}"] == 7

    def test_grouped_rejects_unknown_view(self, client, alice):
        assert client.get("/api/dashboard/grouped?view=team", headers=auth(alice)).status_code == 400

    @pytest.mark.parametrize("path", [
        "/api/dashboard/burndown",
        "/api/dashboard/workload",
        "/api/dashboard/productivity",
        "/api/dashboard/monthly-summary",
        "/api/dashboard/logging-tracker",
    ])
    def test_analytics_views(self, client, alice, path):
        response = client.get(path, headers=auth(alice))
        assert response.status_code == 200

    def test_monthly_summary_hours(self, client, alice):
        body = client.get("/api/dashboard/monthly-summary", headers=auth(alice)).json()
        assert body["current"]["total_hours"] == 7

    def test_due_soon(self, client, alice):
        tasks = client.get("/api/dashboard/due-soon", headers=auth(alice)).json()

        assert [(t["jira_number"], t["days_remaining"]) for t in tasks] == [("ABC-1", 1)]
        assert client.get("/api/dashboard/due-soon?days=0", headers=auth(alice)).json() == []

    def test_requires_identity(self, client):
        assert client.get("/api/dashboard/stats").status_code == 401

    def test_grouped_uses_holidays_of_each_logged_year(self, client, db_session, holiday_service):
        carol = create_user(db_session, "carol")
        create_jira(db_session, carol, "OLD-1", project_name="Legacy", logs=[(date(2023, 5, 2), 6)])
        holiday_service.dates = {date(2023, 5, 1)}

        body = client.get("/api/dashboard/grouped?view=project", headers=auth(carol)).json()

        assert 2023 in holiday_service.years_requested
        assert body["month_capacities"]["2023-05"] == 22 * 8


class TestDeploymentViews:
    """Deployment history and the upcoming schedule."""

    @pytest.fixture
    def dana(self, db_session):
        user = create_user(db_session, "dana")
        today = date.today()
        create_jira(db_session, user, "DEP-1", project_name="Payments",
                    deploy_sit_date=today - timedelta(days=3),
                    deploy_uat_date=today + timedelta(days=1),
                    deploy_prod_date=today - timedelta(days=60))
        return user

    def test_history_defaults_to_thirty_days(self, client, dana):
        body = client.get("/api/dashboard/deployment-history", headers=auth(dana)).json()

        assert [(d["stage"], d["days_ago"]) for d in body["deployments"]] == [("SIT", 3)]
        assert body["projects"] == ["Payments"]

    def test_history_all_time(self, client, dana):
        body = client.get("/api/dashboard/deployment-history?all=true", headers=auth(dana)).json()

        assert [d["stage"] for d in body["deployments"]] == ["SIT", "PROD"]

    def test_upcoming(self, client, dana):
        body = client.get("/api/dashboard/upcoming-deployments", headers=auth(dana)).json()

        assert body["total"] == 1
        assert [(d["jira_number"], d["stage"]) for d in body["tomorrow"]] == [("DEP-1", "UAT")]
