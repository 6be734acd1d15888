"""
Shared fixtures: an in-memory database, a stubbed Greenhouse board and an API client
"""
import os

# Settings are read once at import time
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PREVIEW_CACHE_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("API_KEY", None)

from datetime import timedelta

import httpx
import pytest
from fastapi.testclient import TestClient

from jobboard.core.database import Database
from jobboard.core.dates import utcnow
from jobboard.greenhouse.client import GreenhouseClient
from jobboard.greenhouse.router import get_greenhouse_client
from jobboard.main import create_app

GREENHOUSE_BASE_URL = "https://boards-api.test/v1"
BOARD_TOKEN = "acme"


def greenhouse_record(job_id, title, department=None, location=None, content=None, days_ago=None):
    """A board record shaped like the Greenhouse job board API returns it"""
    updated_at = None
    if days_ago is not None:
        updated_at = (utcnow() - timedelta(days=days_ago)).isoformat()
    return {
        "id": job_id,
        "internal_job_id": job_id + 1000,
        "title": title,
        "updated_at": updated_at,
        "requisition_id": f"REQ-{job_id}",
        "location": {"name": location} if location is not None else None,
        "absolute_url": f"https://boards.greenhouse.io/{BOARD_TOKEN}/jobs/{job_id}",
        "metadata": None,
        "content": content,
        "departments": [{"id": 7, "name": department, "child_ids": []}] if department else [],
        "offices": [],
    }


def sample_board():
    return [
        greenhouse_record(
            4001,
            "Software Engineering Intern",
            department="Engineering",
            location="Remote - US",
            content="&lt;p&gt;Work with React, Node.js and PostgreSQL.&lt;/p&gt;",
            days_ago=2,
        ),
        greenhouse_record(
            4002,
            "Senior Backend Engineer",
            department="Platform",
            location="Austin, TX",
            content=(
                "&lt;ul&gt;&lt;li&gt;Python &amp;amp; Django&lt;/li&gt;"
                "&lt;li&gt;Docker and Kubernetes&lt;/li&gt;&lt;/ul&gt;"
            ),
            days_ago=1,
        ),
        greenhouse_record(
            4003,
            "Data Consultant",
            content="&lt;p&gt;Short engagement.&lt;/p&gt;",
            days_ago=3,
        ),
    ]


class StubBoard:
    """Serves a mutable job list for the board, or a fixed failure status"""

    def __init__(self, jobs=None):
        self.jobs = jobs if jobs is not None else sample_board()
        self.status_code = 200
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"status": self.status_code})
        if request.url.path != f"/v1/boards/{BOARD_TOKEN}/jobs":
            return httpx.Response(404, json={"status": 404, "error": "Job not found"})
        return httpx.Response(200, json={"jobs": self.jobs, "meta": {"total": len(self.jobs)}})

    def client(self) -> GreenhouseClient:
        transport = httpx.MockTransport(self.handler)
        return GreenhouseClient(
            base_url=GREENHOUSE_BASE_URL,
            http_client=httpx.Client(transport=transport),
        )


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def board():
    return StubBoard()


@pytest.fixture
def greenhouse_client(board):
    return board.client()


@pytest.fixture
def client(database, greenhouse_client):
    app = create_app(database)
    app.dependency_overrides[get_greenhouse_client] = lambda: greenhouse_client
    with TestClient(app) as test_client:
        yield test_client
