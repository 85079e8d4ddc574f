import pytest
from fastapi.testclient import TestClient

from careers import config
from careers.models import Job
from careers.sessions import getSession, sessions
from careers.store import RecordStore


@pytest.fixture
def store():
    return RecordStore.from_file(config.DATA_FILE)


@pytest.fixture
def client(store):
    from app import app, get_store

    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
    sessions.clear()


@pytest.fixture
def csrf_token(client):
    """Open a session and return its CSRF token."""
    client.get("/")
    return getSession(session_id=client.cookies.get("session_id")).csrfToken


def make_job(**overrides) -> Job:
    values = {
        "id": "1",
        "title": "Backend Engineer",
        "location": "Austin",
        "job_type": "Full-time",
    }
    values.update(overrides)
    return Job(**values)


@pytest.fixture
def jobs():
    return [
        make_job(id="1", title="Backend Engineer", department="Engineering", location="Austin", job_type="Full-time"),
        make_job(id="2", title="Designer", department="Design", location="Remote", job_type="Contract", is_active=False),
        make_job(id="3", title="Data Engineer", department="Data", location="Remote", job_type="Full-time"),
        make_job(id="4", title="Office Manager", department=None, location="Berlin", job_type="Part-time"),
        make_job(id="5", title="Platform Lead", department="Engineering", location="Austin", job_type="Contract"),
    ]
