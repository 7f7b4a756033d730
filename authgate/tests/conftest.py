"""
Shared fixtures for the authgate test suite.

Google is replaced by an httpx.MockTransport serving the user-info and JWKS
endpoints; the user store runs on in-memory SQLite.
"""

import httpx
import pytest
import pytest_asyncio

from authgate.config import Settings
from authgate.db import UserStore, create_engine, create_session_factory
from authgate.main import build_authenticator, create_app
from authgate.tests.helpers import TEST_CLIENT_ID, TEST_SESSION_SECRET, FakeGoogle


@pytest.fixture
def settings():
    """Settings for tests, independent of the process environment"""
    return Settings(
        _env_file=None,
        GOOGLE_CLIENT_ID=TEST_CLIENT_ID,
        SESSION_JWT_SECRET=TEST_SESSION_SECRET,
        DATABASE_URL="sqlite+aiosqlite://",
    )


@pytest.fixture
def google():
    return FakeGoogle()


@pytest_asyncio.fixture
async def http_client(google):
    async with httpx.AsyncClient(transport=httpx.MockTransport(google.handler)) as client:
        yield client


@pytest_asyncio.fixture
async def engine(settings):
    engine = create_engine(settings.DATABASE_URL)
    await UserStore.create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def user_store(engine):
    return UserStore(create_session_factory(engine))


@pytest.fixture
def authenticator(settings, http_client, user_store):
    return build_authenticator(settings, http_client, user_store)


@pytest.fixture
def app(settings, authenticator):
    """FastAPI app with the test authenticator pre-wired"""
    app = create_app(settings)
    app.state.authenticator = authenticator
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
