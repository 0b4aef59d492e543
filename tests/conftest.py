import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import ducktype.models  # noqa: F401
from ducktype.app import app
from ducktype.database import Base, get_db
from ducktype.services.generation_client import get_generation_client


# Stands in for GenerationClient: returns scripted raw texts in order, then ""
class FakeGenerator:
    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    async def generate(self, instructions, context_messages, **kwargs):
        self.calls.append({"instructions": instructions, "context": list(context_messages), **kwargs})
        return self.replies.pop(0) if self.replies else ""


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def client(session_factory, fake_generator):
    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_generation_client] = lambda: fake_generator
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
