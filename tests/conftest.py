"""
Pytest configuration and shared fixtures.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from readinglist.api.app import create_app
from readinglist.auth.jwt import TokenService
from readinglist.config import Settings
from readinglist.core.utils import generate_id, utc_now
from readinglist.storage import create_local_storage

STRONG_PASSWORD = "aB1!aa"


# =============================================================================
# Builders
# =============================================================================


def build_user(**overrides) -> dict:
    return {
        "id": generate_id("user"),
        "username": f"reader_{uuid.uuid4().hex[:8]}",
        **overrides,
    }


def build_book(**overrides) -> dict:
    suffix = uuid.uuid4().hex[:6]
    return {
        "id": generate_id("book"),
        "title": f"Book {suffix}",
        "author": f"Author {suffix}",
        **overrides,
    }


def build_list_item(**overrides) -> dict:
    return {
        "id": generate_id("item"),
        "ownerId": generate_id("user"),
        "bookId": generate_id("book"),
        "notes": "",
        "rating": None,
        "startDate": "2024-01-01T00:00:00Z",
        "finishDate": None,
        **overrides,
    }


def notes() -> str:
    return f"Some thoughts {uuid.uuid4().hex[:8]}"


def login_form(**overrides) -> dict:
    return {
        "username": f"reader_{uuid.uuid4().hex[:8]}",
        "password": STRONG_PASSWORD,
        **overrides,
    }


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings configured for testing."""
    return Settings(
        environment="test",
        debug=True,
        jwt_secret_key="test-secret",
        password_hash_iterations=1_000,
        sentry_dsn="",
    )


@pytest.fixture
def token_service(settings) -> TokenService:
    return TokenService.from_settings(settings)


@pytest.fixture
def storage():
    """Fresh in-memory storage per test."""
    return create_local_storage()


@pytest.fixture
def app(settings, storage):
    return create_app(settings=settings, storage=storage)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test/api") as ac:
        yield ac


@pytest_asyncio.fixture
async def test_user(app):
    """A registered user with a valid token."""
    form = login_form()
    user = await app.state.user_store.create_user(form["username"], form["password"])
    return {**user, "token": app.state.token_service.issue(user["id"])}


@pytest_asyncio.fixture
async def auth_client(app, test_user):
    """Client that sends the test user's token."""
    headers = {"Authorization": f"Bearer {test_user['token']}"}
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test/api", headers=headers,
    ) as ac:
        yield ac


@pytest.fixture
def frozen_clock(monkeypatch):
    """Pin the time tokens are stamped with, so equal claims sign equally."""
    now = utc_now()
    monkeypatch.setattr("readinglist.auth.jwt.utc_now", lambda: now)
    return now
