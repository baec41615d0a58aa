"""
Shared pytest fixtures.

Uses a SQLite database file so no Postgres is required for tests. The
environment is set before any `mooda` import because settings and the
engine are built at import time.
"""
import os

os.environ["DATABASE_URL"] = "sqlite:///./test_mooda.db"
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ["GEMINI_API_KEY"] = ""
os.environ["SCHEDULER_ENABLED"] = "false"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from mooda.db.base import Base, SessionLocal, engine, get_db, get_session_factory
from mooda.main import app
from mooda.models import ConversationMessage, MessageRole, User
from mooda.services.llm_client import LLMError, get_llm_client

KST = timezone(timedelta(hours=9))
CRON_SECRET = "test-cron-secret"


def override_get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeLLM:
    """Returns canned replies in order; raises LLMError when it runs out."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if not self.replies:
            raise LLMError("no canned reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class BrokenLLM:
    def complete(self, prompt):
        raise LLMError("service unavailable")


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: SessionLocal
    app.dependency_overrides[get_llm_client] = lambda: None
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    def _make(user_id, **kwargs):
        user = User(id=user_id, provider_id=user_id, **kwargs)
        db.add(user)
        db.commit()
        return user
    return _make


@pytest.fixture()
def add_message(db):
    def _add(user_id, content, at, role=MessageRole.user, personality_id=None):
        msg = ConversationMessage(
            user_id=user_id,
            role=role,
            content=content,
            personality_id=personality_id,
            created_at=at.astimezone(timezone.utc),
        )
        db.add(msg)
        db.commit()
        return msg
    return _add


def kst(*args):
    return datetime(*args, tzinfo=KST)
