"""
End-to-end tests for the auth routes.
"""

from datetime import timedelta

import pytest
from fastapi import Depends, FastAPI
from httpx import AsyncClient, ASGITransport

from readinglist.api.errors import setup_exception_handlers
from readinglist.auth import AuthContext, TokenService, optional_auth
from readinglist.core.utils import utc_now
from tests.conftest import STRONG_PASSWORD, login_form

pytestmark = pytest.mark.asyncio


# =============================================================================
# Register / Login / Me
# =============================================================================


class TestAuthFlow:
    async def test_register_login_me(self, client, frozen_clock):
        form = login_form()

        register = await client.post("/auth/register", json=form)
        assert register.status_code == 200
        user = register.json()["user"]
        assert set(user) == {"id", "username", "token"}
        assert user["username"] == form["username"]

        login = await client.post("/auth/login", json=form)
        assert login.status_code == 200
        logged_in = login.json()["user"]
        assert logged_in == user

        headers = {"Authorization": f"Bearer {logged_in['token']}"}
        me = await client.get("/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.json()["user"] == logged_in

    async def test_me_issues_a_fresh_token(self, client, app, test_user, monkeypatch):
        earlier = utc_now() - timedelta(minutes=5)
        monkeypatch.setattr("readinglist.auth.jwt.utc_now", lambda: earlier)
        headers = {"Authorization": f"Bearer {test_user['token']}"}

        response = await client.get("/auth/me", headers=headers)

        assert response.status_code == 200
        token = response.json()["user"]["token"]
        assert token != test_user["token"]
        assert app.state.token_service.verify(token) == test_user["id"]

    async def test_register_example_user(self, client):
        response = await client.post("/auth/register", json={"username": "abc", "password": "aB1!aa"})
        
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "abc"

    async def test_username_must_be_unique(self, client):
        form = login_form()
        await client.post("/auth/register", json=form)
        
        response = await client.post("/auth/register", json=form)
        
        assert response.status_code == 400
        assert response.json() == {"message": "username taken"}

    async def test_password_hash_never_returned(self, client):
        response = await client.post("/auth/register", json=login_form())
        
        assert "passwordHash" not in response.text


class TestValidation:
    @pytest.mark.parametrize("path", ["/auth/register", "/auth/login"])
    async def test_username_required(self, client, path):
        response = await client.post(path, json={"password": STRONG_PASSWORD})
        
        assert response.status_code == 400
        assert response.json() == {"message": "username can't be blank"}

    @pytest.mark.parametrize("path", ["/auth/register", "/auth/login"])
    async def test_password_required(self, client, path):
        response = await client.post(path, json={"username": "someone"})
        
        assert response.status_code == 400
        assert response.json() == {"message": "password can't be blank"}

    async def test_empty_body(self, client):
        response = await client.post("/auth/register")
        
        assert response.status_code == 400
        assert response.json() == {"message": "username can't be blank"}

    async def test_weak_password_rejected(self, client):
        response = await client.post("/auth/register", json=login_form(password="abc123!"))
        
        assert response.status_code == 400
        assert response.json() == {"message": "password is not strong enough"}

    async def test_user_must_exist_to_login(self, client):
        response = await client.post("/auth/login", json=login_form(username="__unperson__"))
        
        assert response.status_code == 400
        assert response.json() == {"message": "username or password is invalid"}

    async def test_wrong_password(self, client):
        form = login_form()
        await client.post("/auth/register", json=form)
        
        response = await client.post("/auth/login", json={**form, "password": "xY9!wrong"})
        
        assert response.status_code == 400
        assert response.json() == {"message": "username or password is invalid"}


# =============================================================================
# Authentication failures
# =============================================================================


class TestMeUnauthenticated:
    async def test_no_token(self, client):
        response = await client.get("/auth/me")
        
        assert response.status_code == 401
        assert response.json() == {
            "code": "credentials_required",
            "message": "No authorization token was found",
        }

    async def test_blank_header_counts_as_no_token(self, client):
        response = await client.get("/auth/me", headers={"Authorization": ""})

        assert response.status_code == 401
        assert response.json()["code"] == "credentials_required"

    async def test_bad_scheme(self, client):
        response = await client.get("/auth/me", headers={"Authorization": "Basic abc"})
        
        assert response.status_code == 401
        assert response.json()["code"] == "credentials_bad_scheme"

    async def test_invalid_token(self, client):
        forged = TokenService(secret_key="not-the-secret").issue("user_1")
        
        response = await client.get("/auth/me", headers={"Authorization": f"Bearer {forged}"})
        
        assert response.status_code == 401
        assert response.json()["code"] == "invalid_token"

    async def test_token_for_deleted_user(self, client, app, test_user):
        await app.state.storage.users.remove(test_user["id"])
        
        response = await client.get(
            "/auth/me", headers={"Authorization": f"Bearer {test_user['token']}"},
        )
        
        assert response.status_code == 404
        assert response.json() == {"message": f"No user was found with the id of {test_user['id']}"}


# =============================================================================
# Optional auth
# =============================================================================


@pytest.fixture
def optional_app(token_service):
    app = FastAPI()
    app.state.token_service = token_service
    
    setup_exception_handlers(app)
    
    @app.get("/whoami")
    async def whoami(ctx: AuthContext = Depends(optional_auth())):
        return {"userId": ctx.user_id, "authenticated": ctx.is_authenticated}
    
    return app


class TestOptionalAuth:
    async def test_anonymous_without_header(self, optional_app):
        async with AsyncClient(transport=ASGITransport(app=optional_app), base_url="http://test") as client:
            response = await client.get("/whoami")
        
        assert response.json() == {"userId": None, "authenticated": False}

    async def test_identity_with_token(self, optional_app, token_service):
        headers = {"Authorization": f"Bearer {token_service.issue('user_7')}"}
        async with AsyncClient(transport=ASGITransport(app=optional_app), base_url="http://test") as client:
            response = await client.get("/whoami", headers=headers)
        
        assert response.json() == {"userId": "user_7", "authenticated": True}

    async def test_bad_token_still_rejected(self, optional_app):
        async with AsyncClient(transport=ASGITransport(app=optional_app), base_url="http://test") as client:
            response = await client.get("/whoami", headers={"Authorization": "Bearer junk"})
        
        assert response.status_code == 401


async def test_health(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")
    
    assert response.json()["status"] == "healthy"
