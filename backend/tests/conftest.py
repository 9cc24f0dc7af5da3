# backend/tests/conftest.py

import os
import tempfile
from datetime import datetime, timezone

# settings are read at import time
_UPLOAD_DIR = tempfile.mkdtemp(prefix="citizen-feedback-uploads-")
os.environ.setdefault("UPLOAD_DIR", _UPLOAD_DIR)
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("DASHBOARD_TIMEZONE", "UTC")

import httpx
import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from citizen_feedback.core import mailer
from citizen_feedback.core.security import create_access_token
from citizen_feedback.crud import admins as admin_crud
from citizen_feedback.db import mongo
from citizen_feedback.main import app
from citizen_feedback.schemas.feedback import FeedbackRecord

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "secret123"


def _build_record(**overrides) -> FeedbackRecord:
    data = {
        "id": "rec",
        "name": "Citizen",
        "phone": "9999999999",
        "description": "Feedback",
        "police_station": "Kotwali",
        "overall_rating": 7,
        "department_ratings": [],
        "created_at": datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc),
    }
    data.update(overrides)
    return FeedbackRecord(**data)


@pytest.fixture
def make_record():
    """FeedbackRecord factory with sensible defaults for pipeline tests."""
    return _build_record


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def test_db(monkeypatch):
    client = AsyncMongoMockClient()
    database = client["citizen_feedback_test"]
    monkeypatch.setattr(mongo, "db", database)
    yield database
    monkeypatch.setattr(mongo, "db", None)


@pytest.fixture
def outbox(monkeypatch):
    """Captures outgoing mail instead of talking to SMTP."""
    sent = []

    async def fake_send_mail(to, content):
        subject, html, text = content
        sent.append({"to": to, "subject": subject, "html": html, "text": text})

    monkeypatch.setattr(mailer, "send_mail", fake_send_mail)
    return sent


@pytest_asyncio.fixture
async def client(test_db):
    # ASGITransport does not run the lifespan, so the mock DB stays in place
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest_asyncio.fixture
async def admin(test_db):
    return await admin_crud.create_admin(ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def auth_headers(admin):
    token = create_access_token(subject=admin.id, email=admin.email)
    return {"Authorization": f"Bearer {token}"}
