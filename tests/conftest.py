"""
Test configuration and fixtures for the URL shortener microservice.
This centralizes all test setup, making individual tests clean.
"""

import asyncio
import os

# Must be set before the app (and its settings) are imported.
# TEST_DATABASE_URL (see run_tests.py) selects another throwaway database.
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ["SEQUENCE_BACKEND"] = "database"

import pytest
from fastapi.testclient import TestClient

from main import app
from shorturl_app.database.connection import (
    SessionLocal,
    create_engine_for,
    create_session_factory,
    drop_db,
    init_db,
)
from shorturl_app.dependencies import get_hostname_resolver
from shorturl_app.sequence.strategies import DatabaseSequenceAllocator
from shorturl_app.services.url_registry import URLRegistry
from shorturl_app.services.url_service import URLService
from shorturl_app.services.url_validator import URLValidator

RESOLVABLE_HOSTS = {"www.example.com", "example.com", "www.python.org", "::1"}


class FakeResolver:
    """Resolver that only knows a fixed set of hosts (no network in tests)"""

    def __init__(self, hosts=RESOLVABLE_HOSTS):
        self.hosts = set(hosts)
        self.lookups = []

    async def resolves(self, host: str) -> bool:
        self.lookups.append(host)
        return host in self.hosts


def build_service(session, resolver=None, registry=None, allocator=None) -> URLService:
    """URLService wired the same way the API wires it, over one session"""
    return URLService(
        registry=registry or URLRegistry(session),
        allocator=allocator or DatabaseSequenceAllocator(session),
        validator=URLValidator(resolver or FakeResolver()),
    )


@pytest.fixture(scope="function")
def database():
    """
    Create fresh tables for each test.
    This ensures tests are isolated and don't affect each other.
    """
    asyncio.run(init_db())
    yield SessionLocal
    asyncio.run(drop_db())


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def broken_store(tmp_path):
    """get_db replacement whose database file can never be opened"""
    broken_engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'store.db'}")
    broken_sessions = create_session_factory(broken_engine)

    async def override_get_db():
        async with broken_sessions() as session:
            yield session

    override_get_db.session_factory = broken_sessions
    return override_get_db


@pytest.fixture(scope="function")
def client(database, resolver):
    """
    Create a test client with DNS resolution overridden.
    This is the main fixture that tests will use.
    """
    app.dependency_overrides[get_hostname_resolver] = lambda: resolver

    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
