import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from db.models import AuditStatus, CategoryResult
from db.session import get_db_session
from main import app


class FakeResult:
    def __init__(self, rows):
        self.rows = rows

    def scalar_one_or_none(self):
        return self.rows[0] if self.rows else None

    def scalars(self):
        return self

    def all(self):
        return list(self.rows)


class FakeSession:
    """Session that stores added rows and answers every query with ``rows``."""

    def __init__(self, rows=()):
        self.rows = list(rows)
        self.added = []

    def add(self, obj):
        self.added.append(obj)

    async def flush(self):
        for obj in self.added:
            if obj.id is None:
                obj.id = uuid.uuid4()

    async def commit(self):
        pass

    async def rollback(self):
        pass

    async def execute(self, query):
        return FakeResult(self.rows)


class FakeTask:
    def __init__(self):
        self.calls = []

    def delay(self, *args):
        self.calls.append(args)


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def task(monkeypatch):
    task = FakeTask()
    monkeypatch.setattr("api.routes.audits.run_page_audit", task)
    return task


@pytest.fixture
def client(session, task):
    async def override():
        yield session

    app.dependency_overrides[get_db_session] = override
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "lantern", "version": "0.1.0"}


def test_create_audit_queues_the_worker(client, session, task):
    response = client.post(
        "/api/v1/audits",
        json={"url": "https://example.com", "budget": "blog", "screenshots": True},
    )

    assert response.status_code == 202
    body = response.json()
    assert body["status"] == "pending"
    assert task.calls == [(body["id"],)]

    audit = session.added[0]
    assert audit.status == AuditStatus.PENDING
    assert audit.options == {"budget": "blog", "budget_overrides": {}, "screenshots": True}


def test_create_audit_rejects_unknown_budget(client, task):
    response = client.post("/api/v1/audits", json={"url": "https://example.com", "budget": "gaming"})

    assert response.status_code == 400
    assert task.calls == []


def test_create_audit_rejects_invalid_url(client, task):
    response = client.post("/api/v1/audits", json={"url": "not a url"})

    assert response.status_code == 422
    assert task.calls == []


def test_unknown_audit_is_404(client):
    response = client.get(f"/api/v1/audits/{uuid.uuid4()}")

    assert response.status_code == 404


def test_list_audits(client):
    response = client.get("/api/v1/audits")

    assert response.status_code == 200
    assert response.json() == {"audits": [], "count": 0}


def test_category_history(client, session):
    audit_id = uuid.uuid4()
    session.rows = [
        CategoryResult(
            audit_id=audit_id,
            category="seo",
            score=82.5,
            grade="B",
            issue_count=3,
            created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
    ]

    response = client.get(
        "/api/v1/audits/history", params={"url": "https://example.com/", "category": "seo"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["category"] == "seo"
    assert body["points"] == [
        {
            "audit_id": str(audit_id),
            "score": 82.5,
            "grade": "B",
            "issue_count": 3,
            "created_at": "2024-05-01T00:00:00Z",
        }
    ]


def test_category_history_rejects_unknown_category(client):
    response = client.get(
        "/api/v1/audits/history", params={"url": "https://example.com/", "category": "speed"}
    )

    assert response.status_code == 400


def test_create_audit_rejects_degenerate_budget_override(client, task):
    response = client.post(
        "/api/v1/audits",
        json={
            "url": "https://example.com",
            "budget_overrides": {"lcp": {"good": 0, "needs_work": 0, "max": 0}},
        },
    )

    assert response.status_code == 422
    assert task.calls == []
