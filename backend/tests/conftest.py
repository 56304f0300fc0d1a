"""Shared test fixtures."""

import os

# Keep the application's own engine off disk and the cloud backend disabled
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["CLOUD_ENDPOINT"] = ""
os.environ["CLOUD_PROJECT_ID"] = ""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import date, datetime
from decimal import Decimal
import json
import uuid

import httpx

from onlyfunds.config import Settings
from onlyfunds.database import Base, get_db
from onlyfunds.main import app
from onlyfunds.models.user import User
from onlyfunds.models.transaction import Transaction, TransactionType
from onlyfunds.models.budget import Budget
from onlyfunds.services.auth_service import hash_password
from onlyfunds.services.budget_service import ProgressStore, get_progress_store
from onlyfunds.services.cloud import CloudClient, get_cloud_client


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def progress_store():
    """A progress store isolated from the application-wide one."""
    return ProgressStore()


@pytest.fixture
def offline_cloud():
    """Cloud client with no backend configured."""
    return CloudClient(config=Settings(_env_file=None, cloud_endpoint=None, cloud_project_id=None))


@pytest.fixture(scope="function")
def client(db_session, progress_store, offline_cloud):
    """Create a test client with database, progress store and cloud overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_progress_store] = lambda: progress_store
    app.dependency_overrides[get_cloud_client] = lambda: offline_cloud
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_user(db_session):
    """Create a sample user."""
    user = User(
        id=str(uuid.uuid4()),
        username="jane_doe",
        email="jane@example.com",
        hashed_password=hash_password("Secret123"),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(sample_user):
    return {"x-user-id": sample_user.id}


@pytest.fixture
def make_transaction(db_session, sample_user):
    """Factory for stored transactions."""
    def _make(amount, category="food", on=date(2024, 6, 5), type=TransactionType.expense, user=None):
        txn = Transaction(
            id=str(uuid.uuid4()),
            user_id=(user or sample_user).id,
            type=type,
            amount=Decimal(str(amount)),
            description=f"{category} {amount}",
            category=category,
            date=on,
            created_at=datetime(2024, 6, 1, 12, 0, 0),
        )
        db_session.add(txn)
        db_session.commit()
        db_session.refresh(txn)
        return txn
    return _make


@pytest.fixture
def make_budget(db_session, sample_user):
    """Factory for stored budgets."""
    def _make(amount, category="food", month=6, year=2024, user=None):
        budget = Budget(
            id=str(uuid.uuid4()),
            user_id=(user or sample_user).id,
            category=category,
            amount=Decimal(str(amount)),
            month=month,
            year=year,
        )
        db_session.add(budget)
        db_session.commit()
        db_session.refresh(budget)
        return budget
    return _make


class FakeCloud:
    """In-memory document store speaking a subset of the Appwrite REST API."""

    def __init__(self):
        self.collections = {"transactions": [], "budgets": []}
        self.requests = []
        self.fail_with = None
        self._next_id = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"message": "error"})

        parts = request.url.path.split("/")
        # /v1/databases/{db}/collections/{collection}/documents[/{id}]
        collection = parts[5]
        docs = self.collections[collection]
        doc_id = parts[7] if len(parts) > 7 else None

        if request.method == "POST":
            body = json.loads(request.content)
            self._next_id += 1
            doc = dict(body["data"], **{"$id": f"doc-{self._next_id}"})
            docs.append(doc)
            return httpx.Response(201, json=doc)

        if request.method == "GET":
            matches = list(docs)
            for raw in request.url.params.get_list("queries[]"):
                query = json.loads(raw)
                if query["method"] == "equal":
                    matches = [d for d in matches if d.get(query["attribute"]) in query["values"]]
            return httpx.Response(200, json={"total": len(matches), "documents": matches})

        doc = next((d for d in docs if d["$id"] == doc_id), None)
        if doc is None:
            return httpx.Response(404, json={"message": "not found"})

        if request.method == "PATCH":
            doc.update(json.loads(request.content)["data"])
            return httpx.Response(200, json=doc)

        if request.method == "DELETE":
            docs.remove(doc)
            return httpx.Response(204)

        return httpx.Response(405)


@pytest.fixture
def fake_cloud():
    return FakeCloud()


@pytest.fixture
def cloud_client(fake_cloud):
    """Cloud client wired to the in-memory fake backend."""
    config = Settings(
        _env_file=None,
        cloud_endpoint="https://cloud.example.com/v1",
        cloud_project_id="project-1",
        cloud_api_key="secret-key",
    )
    return CloudClient(config=config, transport=httpx.MockTransport(fake_cloud.handler))
