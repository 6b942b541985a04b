"""
API tests for team lead endpoints
"""
from datetime import date

import pytest

from factories import auth, create_jira, create_team, create_user


@pytest.fixture
def people(db_session):
    return {
        "lead": create_user(db_session, "lead", roles=["TEAM LEAD"]),
        "alice": create_user(db_session, "alice", user_type="Core"),
        "bob": create_user(db_session, "bob"),
        "admin": create_user(db_session, "admin", roles=["ADMIN"]),
    }


class TestTeamMembership:
    """Roster management."""

    def test_team_lead_only(self, client, people):
        assert client.get("/api/team", headers=auth(people["alice"])).status_code == 403

    def test_no_team_yet(self, client, people):
        body = client.get("/api/team", headers=auth(people["lead"])).json()

        assert body["team"] is None
        assert [m["username"] for m in body["available_members"]] == ["alice", "bob"]

    def test_save_team(self, client, people):
        response = client.post("/api/team", headers=auth(people["lead"]), json={
            "team_name": "Platform",
            "member_ids": [str(people["alice"].id), str(people["bob"].id)],
        })

        assert response.status_code == 200
        team = response.json()["team"]
        assert team["team_name"] == "Platform"
        assert sorted(team["member_ids"]) == sorted([str(people["alice"].id), str(people["bob"].id)])

        renamed = client.post("/api/team", headers=auth(people["lead"]),
                              json={"team_name": "Core Platform", "member_ids": [str(people["alice"].id)]})
        assert renamed.json()["team"]["id"] == team["id"]
        assert [m["username"] for m in renamed.json()["team"]["members"]] == ["alice"]

    def test_save_team_validation(self, client, people):
        missing_name = client.post("/api/team", headers=auth(people["lead"]), json={"member_ids": []})
        unknown_member = client.post("/api/team", headers=auth(people["lead"]), json={
            "team_name": "Platform", "member_ids": ["2f1b8c1e-0000-4000-8000-000000000000"],
        })

        assert missing_name.status_code == 400
        assert unknown_member.status_code == 400

    def test_remove_members(self, client, db_session, people):
        no_team = client.request("DELETE", "/api/team", headers=auth(people["lead"]),
                                 json={"member_ids": [str(people["bob"].id)]})
        assert no_team.status_code == 404

        create_team(db_session, people["lead"], [people["alice"], people["bob"]])
        response = client.request("DELETE", "/api/team", headers=auth(people["lead"]),
                                  json={"member_ids": [str(people["bob"].id)]})

        assert response.status_code == 200
        assert [m["username"] for m in response.json()["team"]["members"]] == ["alice"]


class TestTeamViews:
    """Member tasks and team analytics."""

    @pytest.fixture
    def team(self, db_session, people):
        today = date.today()
        create_jira(db_session, people["alice"], "ABC-1", actual_status="In Progress", logs=[(today, 6)])
        create_jira(db_session, people["alice"], "ABC-2", actual_status="Done")
        create_jira(db_session, people["bob"], "ABC-3", actual_status="Blocked")
        return create_team(db_session, people["lead"], [people["alice"], people["bob"]])

    def test_open_tasks_by_member(self, client, people, team):
        body = client.get("/api/team/jiras", headers=auth(people["lead"])).json()

        alice = body[str(people["alice"].id)]
        assert alice["member_info"]["username"] == "alice"
        assert [j["jira_number"] for j in alice["jiras"]] == ["ABC-1"]
        assert [j["jira_number"] for j in body[str(people["bob"].id)]["jiras"]] == ["ABC-3"]

    def test_summary(self, client, people, team):
        body = client.get("/api/team/summary", headers=auth(people["lead"])).json()

        assert body["team_name"] == "Platform"
        assert body["team_size"] == 2
        assert body["month_hours"] == 6
        assert body["blocked_count"] == 1

    def test_alerts(self, client, people, team):
        response = client.get("/api/team/alerts", headers=auth(people["lead"]))

        assert response.status_code == 200
        ids = [alert["id"] for alert in response.json()]
        assert "blocked_tasks" in ids
        assert all({"type", "priority", "title", "message"} <= set(alert) for alert in response.json())

    def test_velocity(self, client, people, team):
        body = client.get("/api/team/velocity", headers=auth(people["lead"])).json()

        assert body["total_hours"] == 6
        assert [m["username"] for m in body["members"]] == ["alice", "bob"]

    def test_views_without_team(self, client, people):
        assert client.get("/api/team/jiras", headers=auth(people["lead"])).json() == {}
        assert client.get("/api/team/summary", headers=auth(people["lead"])).json()["team_size"] == 0
        assert client.get("/api/team/alerts", headers=auth(people["lead"])).json() == []
