"""
Shared fixtures.

Settings are read when ``hookguard`` is first imported, so the test
environment is set up here before anything from the package is loaded.
"""

import os
import tempfile
from datetime import datetime, timedelta

_DB_PATH = os.path.join(tempfile.gettempdir(), f"hookguard-test-{os.getpid()}.db")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["TOKEN_HASHING_SALT"] = "test-salt"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["ENVIRONMENT"] = "testing"
os.environ["MAX_REQUESTS_PER_WINDOW"] = "5"
os.environ["RATE_LIMIT_WINDOW_SECONDS"] = "60"

import pytest
from httpx import ASGITransport, AsyncClient

from hookguard.adapters.outbound.persistence.memory_store import InMemoryTokenStore
from hookguard.application.use_cases.client_use_cases import AsyncClientService
from hookguard.application.use_cases.webhook_token_use_cases import AsyncWebhookTokenService

ADMIN_API_KEY = os.environ["ADMIN_API_KEY"]
HASHING_SALT = os.environ["TOKEN_HASHING_SALT"]


class FakeClock:
    """Settable UTC clock for the services."""

    def __init__(self, now: datetime = datetime(2026, 1, 1, 12, 0, 0)):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeMonotonic:
    """Settable monotonic clock for the rate limiter."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    return InMemoryTokenStore()


@pytest.fixture
def client_service(memory_store, clock):
    return AsyncClientService(store=memory_store, clock=clock)


@pytest.fixture
def token_service(memory_store, clock):
    return AsyncWebhookTokenService(
        store=memory_store,
        hashing_salt=HASHING_SALT,
        default_expiration=timedelta(days=30),
        max_tokens_per_client=5,
        clock=clock,
    )


@pytest.fixture
async def database():
    """Fresh SQLite schema for each test."""
    from hookguard.adapters.outbound.persistence.database import create_tables, drop_tables, engine

    await drop_tables()
    await create_tables()
    yield engine
    await drop_tables()
    # Pooled aiosqlite connections belong to this test's event loop
    await engine.dispose()


@pytest.fixture
async def app(database):
    from hookguard.main import app as fastapi_app

    fastapi_app.state.rate_limiter.reset()
    token_service = fastapi_app.state.token_service
    token_service.usage_log_failures = 0
    yield fastapi_app
    fastapi_app.state.rate_limiter.reset()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_API_KEY}"}
