"""
Pytest configuration and shared fixtures for the command interpreter tests.
"""
import os
import tempfile

# Must be set before the app modules read their settings at import time.
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(tempfile.gettempdir(), "sci_app_test.sqlite")
os.environ.setdefault("ANTHROPIC_API_KEY", "test_anthropic_key")

import pytest
from types import SimpleNamespace
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from database.models import Base, Client, Lead, Meeting, Project, Task, TimeEntry
from database.connection import get_db
from app.dependencies import get_intent_classifier
from app.domain.commands import RequestContext
from app.infrastructure.anthropic_classifier import AnthropicIntentClassifier
from main import app

ORG_A = "org-a"
ORG_B = "org-b"
USER_ID = "user-1"
WRITE_TABLES = (Task, Lead, TimeEntry, Meeting)


@pytest.fixture(scope="session")
def test_db_engine():
    """File-based SQLite so the TestClient and direct sessions see the same data."""
    tmp_path = os.path.join(tempfile.gettempdir(), "sci_test_db.sqlite")
    engine = create_engine(
        f"sqlite:///{tmp_path}",
        connect_args={"check_same_thread": False}
    )
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    """Create a fresh database session for each test."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine
    )

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        with test_db_engine.connect() as connection:
            with connection.begin():
                for table in reversed(Base.metadata.sorted_tables):
                    connection.execute(table.delete())


class FakeMessages:
    """Stand-in for the Anthropic Messages API returning scripted replies."""

    def __init__(self):
        self.calls = []
        self.script = {}
        self.default = tool_reply("unknown", {}, "not understood")

    def reply(self, message, content):
        self.script[message] = content

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        message = kwargs["messages"][0]["content"]
        content = self.script.get(message, self.default)
        if isinstance(content, Exception):
            raise content
        return SimpleNamespace(content=content)


class FakeAnthropicClient:
    def __init__(self):
        self.messages = FakeMessages()


def tool_reply(action, data=None, summary="ok"):
    """Build the content of a reply carrying a single record_command tool call."""
    payload = {"action": action, "data": data if data is not None else {}, "summary": summary}
    return [SimpleNamespace(type="tool_use", name="record_command", input=payload)]


def text_reply(text):
    return [SimpleNamespace(type="text", text=text)]


@pytest.fixture
def fake_oracle():
    return FakeAnthropicClient()


@pytest.fixture
def classifier(fake_oracle):
    return AnthropicIntentClassifier(client=fake_oracle)


@pytest.fixture
def test_client(test_db_session, classifier):
    """Create a test client with the database and oracle overridden."""

    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_intent_classifier] = lambda: classifier

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def request_ctx():
    return RequestContext(organization_id=ORG_A, user_id=USER_ID, locale="en")


@pytest.fixture
def sample_project(test_db_session):
    """Project "Levi Villa" (id p1) owned by ORG_A."""
    project = Project(id="p1", organization_id=ORG_A, name="Levi Villa", status="active")
    test_db_session.add(project)
    test_db_session.commit()
    test_db_session.refresh(project)
    return project


@pytest.fixture
def sample_client(test_db_session):
    client = Client(id="c1", organization_id=ORG_A, name="Dana Cohen", status="active")
    test_db_session.add(client)
    test_db_session.commit()
    test_db_session.refresh(client)
    return client


def count_writes(session):
    """Number of rows across every table the interpreter can insert into."""
    return sum(session.query(model).count() for model in WRITE_TABLES)


def command_payload(message, organization_id=ORG_A, user_id=USER_ID, **extra):
    payload = {"message": message, "organizationId": organization_id, "userId": user_id}
    payload.update(extra)
    return payload
