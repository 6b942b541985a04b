"""
Shared fixtures: in-memory database, API client and fake external services
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["BOT_API_KEY"] = ""
os.environ["JIRA_URL"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from connectors.errors import ExternalServiceError
from connectors.jira import get_jira_connector
from core.database import Base, get_db, get_redis
from main import app
from models import jira, master_data, team  # noqa: F401
from services.holidays import get_holiday_service

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeJiraConnector:
    """Stands in for the JIRA REST client"""

    def __init__(self):
        self.statuses = {}
        self.issues = []
        self.error = None
        self.requested = []

    async def fetch_statuses(self, jira_numbers):
        if self.error:
            raise self.error
        keys = list(jira_numbers)
        self.requested.append(keys)
        return {key: self.statuses[key] for key in keys if key in self.statuses}

    async def fetch_assigned_issues(self, email):
        if self.error:
            raise self.error
        return [issue for issue in self.issues if issue.get("assignee_email") == email]


class FakeHolidayConnector:
    def __init__(self, configured=True):
        self.configured = configured


class FakeHolidayService:
    """Holiday lookups without the Bank of Thailand API"""

    def __init__(self):
        self.connector = FakeHolidayConnector()
        self.holidays = []
        self.dates = set()
        self.years_requested = []
        self.error = None

    async def get_holidays(self, year):
        if self.error:
            raise self.error
        return [h for h in self.holidays if h["date"].startswith(str(year))]

    async def holiday_dates(self, year):
        self.years_requested.append(year)
        return {day for day in self.dates if day.year == year}


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def jira_connector():
    return FakeJiraConnector()


@pytest.fixture
def holiday_service():
    return FakeHolidayService()


@pytest.fixture
def client(db_session, jira_connector, holiday_service):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: None
    app.dependency_overrides[get_jira_connector] = lambda: jira_connector
    app.dependency_overrides[get_holiday_service] = lambda: holiday_service

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def jira_unavailable():
    return ExternalServiceError("JIRA", "connection refused", 503)
