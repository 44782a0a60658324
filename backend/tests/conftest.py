"""
Notemail Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── db_engine: in-memory SQLite engine (aiosqlite, StaticPool) with the
    │              schema created from the ORM metadata
    ├── db_session: AsyncSession bound to db_engine
    ├── fake_transport / transport_factory: stand-in for aiosmtplib.SMTP
    ├── mail_relay / unconfigured_relay: MailRelay instances over the fake
    └── test_client: HTTPX AsyncClient talking to a fresh app via ASGITransport
"""

import os

# Set before any notemail import so Settings never sees production values
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["GMAIL_USER"] = ""
os.environ["GMAIL_APP_PASSWORD"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator, List  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from notemail.database import Base, get_db_session  # noqa: E402
from notemail.models.note import Note  # noqa: E402,F401
from notemail.services.mail_relay import MailRelay  # noqa: E402

SENDER = "notes@example.com"
APP_PASSWORD = "abcd efgh ijkl mnop"


class FakeSMTP:
    """
    Mimics the parts of aiosmtplib.SMTP the relay uses.

    Records every sent message; `connect`/`login` are AsyncMocks so tests
    can count handshakes.
    """

    def __init__(self):
        self.is_connected = False
        self.sent: List = []
        self.fail_with = None

        async def _connect():
            self.is_connected = True

        async def _quit():
            self.is_connected = False

        self.connect = AsyncMock(side_effect=_connect)
        self.login = AsyncMock()
        self.quit = AsyncMock(side_effect=_quit)
        self.close = MagicMock(side_effect=lambda: setattr(self, "is_connected", False))

    async def send_message(self, message):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(message)
        return {}, "OK"


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Mail Relay Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_transport():
    return FakeSMTP()


@pytest.fixture
def transport_factory(fake_transport):
    """Coroutine factory returning the shared FakeSMTP; counts its calls."""
    return AsyncMock(return_value=fake_transport)


@pytest.fixture
def mail_relay(transport_factory):
    return MailRelay(
        sender=SENDER,
        password=APP_PASSWORD,
        transport_factory=transport_factory,
    )


@pytest.fixture
def unconfigured_relay(transport_factory):
    return MailRelay(sender=None, password=None, transport_factory=transport_factory)


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client Fixtures
# ══════════════════════════════════════════════════════════════════════════

def _build_client_app(session_factory, relay):
    from notemail.main import create_app

    app = create_app(mail_relay=relay)

    async def override_db_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    return app


@pytest_asyncio.fixture
async def test_client(session_factory, mail_relay):
    """
    HTTPX AsyncClient routed straight into a fresh app.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/notes")
            assert response.status_code == 200
    """
    app = _build_client_app(session_factory, mail_relay)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def unconfigured_client(session_factory, unconfigured_relay):
    app = _build_client_app(session_factory, unconfigured_relay)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
