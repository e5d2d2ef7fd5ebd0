"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database (one shared connection via
StaticPool so the test session and the app see the same data) and a tracer
wired to an in-memory span exporter.
"""

import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import get_current_user
from app.core.tracing import get_tracer
from app.database import Base, get_db
from app.main import app
from tests.factories import TEST_USER_ID


async def mock_get_current_user() -> dict:
    """Mock auth dependency that returns a test user."""
    return {"sub": str(TEST_USER_ID)}


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
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def tracer(span_exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider.get_tracer("tests")


def _build_client(session_factory, tracer, authenticated: bool):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_tracer] = lambda: tracer
    if authenticated:
        app.dependency_overrides[get_current_user] = mock_get_current_user
    return TestClient(app)


@pytest.fixture
def client(session_factory, tracer):
    yield _build_client(session_factory, tracer, authenticated=True)
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(session_factory, tracer):
    """Client that goes through real bearer-token verification."""
    yield _build_client(session_factory, tracer, authenticated=False)
    app.dependency_overrides.clear()
