"""
API tests for endpoints backed by JIRA, the holiday calendar and the export
"""
from datetime import date
from io import BytesIO

import openpyxl
import pytest

from connectors.errors import ExternalServiceError
from factories import auth, create_jira, create_user
from services.export import XLSX_MEDIA_TYPE


@pytest.fixture
def alice(db_session):
    return create_user(db_session, "alice")


class TestJiraLookups:
    """Live JIRA statuses and assignments."""

    def test_statuses(self, client, alice, jira_connector):
        jira_connector.statuses = {"ABC-1": "In Review"}

        response = client.get("/api/jira-status?jiraNumbers=ABC-1,ABC-2", headers=auth(alice))

        assert response.status_code == 200
        assert response.json() == {"statuses": {"ABC-1": "In Review"}}
        assert jira_connector.requested == [["ABC-1", "ABC-2"]]

    def test_statuses_param_required(self, client, alice):
        assert client.get("/api/jira-status", headers=auth(alice)).status_code == 400

    def test_upstream_failure(self, client, alice, jira_connector, jira_unavailable):
        jira_connector.error = jira_unavailable
        assert client.get("/api/jira-status?jiraNumbers=ABC-1", headers=auth(alice)).status_code == 502

    def test_my_jiras(self, client, alice, jira_connector):
        jira_connector.issues = [{"key": "ABC-1", "assignee_email": "alice@example.com"}]

        assert client.get("/api/my-jiras", headers=auth(alice)).status_code == 400
        response = client.get("/api/my-jiras?email=alice@example.com", headers=auth(alice))
        assert [i["key"] for i in response.json()] == ["ABC-1"]


class TestHolidays:
    """Holiday calendar endpoint."""

    def test_year_required(self, client):
        assert client.get("/api/holidays").status_code == 400

    def test_holidays(self, client, holiday_service):
        holiday_service.holidays = [
            {"date": "2024-05-01", "name": "Labour Day", "name_eng": "Labour Day", "week_day": "Wednesday"},
            {"date": "2025-01-01", "name": "New Year", "name_eng": "New Year", "week_day": "Wednesday"},
        ]

        body = client.get("/api/holidays?year=2024").json()

        assert body["success"] is True
        assert [h["date"] for h in body["holidays"]] == ["2024-05-01"]

    def test_not_configured(self, client, holiday_service):
        holiday_service.connector.configured = False
        assert client.get("/api/holidays?year=2024").status_code == 500

    def test_upstream_failure(self, client, holiday_service):
        holiday_service.error = ExternalServiceError("Holiday API", "timeout")
        assert client.get("/api/holidays?year=2024").status_code == 502


class TestExcelExport:
    """Work log download."""

    def _seed(self, db_session, user):
        create_jira(db_session, user, "ABC-1", description="Fix login", jira_status="To Do",
                    logs=[(date(2024, 5, 2), 3), (date(2024, 5, 3), 2)])

    def test_download(self, client, db_session, alice, jira_connector):
        self._seed(db_session, alice)
        jira_connector.statuses = {"ABC-1": "In Review"}

        response = client.get("/api/export/excel?start_date=2024-05-01&end_date=2024-05-31", headers=auth(alice))

        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_MEDIA_TYPE
        assert response.headers["content-disposition"].startswith('attachment; filename="work_log_')
        ws = openpyxl.load_workbook(BytesIO(response.content))["Summary"]
        assert ws.cell(row=2, column=1).value == "ABC-1"
        assert ws.cell(row=2, column=5).value == "In Review"
        assert ws.cell(row=2, column=8).value == 5

    def test_falls_back_to_stored_status(self, client, db_session, alice, jira_connector, jira_unavailable):
        self._seed(db_session, alice)
        jira_connector.error = jira_unavailable

        response = client.get("/api/export/excel?start_date=2024-05-01&end_date=2024-05-31", headers=auth(alice))

        assert response.status_code == 200
        ws = openpyxl.load_workbook(BytesIO(response.content))["Summary"]
        assert ws.cell(row=2, column=5).value == "To Do"

    def test_inverted_range(self, client, alice):
        response = client.get("/api/export/excel?start_date=2024-05-31&end_date=2024-05-01", headers=auth(alice))
        assert response.status_code == 400


class TestSystem:
    def test_scheduler_status(self, client, db_session):
        admin = create_user(db_session, "root", roles=["ADMIN"])
        developer = create_user(db_session, "alice")

        assert client.get("/api/system/scheduler", headers=auth(developer)).status_code == 403
        assert client.get("/api/system/scheduler", headers=auth(admin)).json() == {"status": "stopped", "jobs": []}

    def test_manual_status_sync_reports_updates(self, client, db_session, jira_connector):
        admin = create_user(db_session, "root", roles=["ADMIN"])
        jira = create_jira(db_session, admin, "ABC-1", jira_status="To Do")
        jira_connector.statuses = {"ABC-1": "In Review"}

        response = client.post("/api/system/scheduler/status-sync", headers=auth(admin))

        assert response.status_code == 200
        assert response.json()["updated"] == 1
        db_session.refresh(jira)
        assert jira.jira_status == "In Review"

    def test_manual_status_sync_surfaces_jira_failure(self, client, db_session, jira_connector, jira_unavailable):
        admin = create_user(db_session, "root", roles=["ADMIN"])
        create_jira(db_session, admin, "ABC-1", jira_status="To Do")
        jira_connector.error = jira_unavailable

        response = client.post("/api/system/scheduler/status-sync", headers=auth(admin))

        assert response.status_code == 502

    def test_manual_status_sync_is_admin_only(self, client, db_session):
        lead = create_user(db_session, "carol", roles=["IT LEAD"])

        assert client.post("/api/system/scheduler/status-sync", headers=auth(lead)).status_code == 403
