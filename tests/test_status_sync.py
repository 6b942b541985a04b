"""
Tests for the scheduled JIRA status refresh
"""
import asyncio

import pytest

from connectors.errors import ExternalServiceError
from core.scheduler import run_status_sync
from factories import create_jira, create_user
from services.status_sync import open_jiras, sync_jira_statuses


def test_only_open_tasks_are_refreshed(db_session, jira_connector):
    user = create_user(db_session, "alice")
    stale = create_jira(db_session, user, "ABC-1", jira_status="To Do", actual_status="In Progress")
    unchanged = create_jira(db_session, user, "ABC-2", jira_status="In Review")
    create_jira(db_session, user, "ABC-3", jira_status="In Review", actual_status="Done")
    jira_connector.statuses = {"ABC-1": "In Review", "ABC-2": "In Review", "ABC-3": "Closed"}

    updated = asyncio.run(sync_jira_statuses(db_session, jira_connector))

    assert updated == 1
    assert sorted(jira_connector.requested[0]) == ["ABC-1", "ABC-2"]
    db_session.refresh(stale)
    db_session.refresh(unchanged)
    assert stale.jira_status == "In Review"
    assert unchanged.jira_status == "In Review"


def test_open_jiras_treats_missing_status_as_open(db_session):
    user = create_user(db_session, "alice")
    create_jira(db_session, user, "ABC-1")
    create_jira(db_session, user, "ABC-2", actual_status="closed")

    assert [j.jira_number for j in open_jiras(db_session)] == ["ABC-1"]


def test_run_status_sync_propagates_jira_errors(db_session, jira_connector, jira_unavailable):
    user = create_user(db_session, "alice")
    create_jira(db_session, user, "ABC-1", jira_status="To Do")
    jira_connector.error = jira_unavailable

    with pytest.raises(ExternalServiceError):
        asyncio.run(run_status_sync(db_session, jira_connector))
