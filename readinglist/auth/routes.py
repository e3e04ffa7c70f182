# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST /auth/register     - Create account, returns user + token
#   POST /auth/login        - Check credentials, returns user + token
#   GET  /auth/me           - Current user + a fresh token
#
# =============================================================================

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from readinglist.auth.context import AuthContext
from readinglist.auth.jwt import TokenService
from readinglist.auth.passwords import is_password_allowed
from readinglist.auth.policies import get_token_service, require_auth
from readinglist.auth.users import UserStore
from readinglist.core.errors import BadRequestError, NotFoundError
from readinglist.core.models import UserCredentials

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def _require_credentials(data: UserCredentials | None) -> tuple[str, str]:
    data = data or UserCredentials()
    if not data.username:
        raise BadRequestError("username can't be blank")
    if not data.password:
        raise BadRequestError("password can't be blank")
    return data.username, data.password


def _user_response(user: dict, token: str) -> dict:
    return {"user": {"id": user["id"], "username": user["username"], "token": token}}


# =============================================================================
# Public Endpoints
# =============================================================================

@router.post("/register")
async def register(
    data: UserCredentials | None = None,
    users: UserStore = Depends(get_user_store),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Create a new account.
    
    Returns the user with a token on success.
    """
    username, password = _require_credentials(data)
    if not is_password_allowed(password):
        raise BadRequestError("password is not strong enough")
    
    user = await users.create_user(username, password)
    return _user_response(user, tokens.issue(user["id"]))


@router.post("/login")
async def login(
    data: UserCredentials | None = None,
    users: UserStore = Depends(get_user_store),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Authenticate and get a token.
    """
    username, password = _require_credentials(data)
    user = await users.authenticate(username, password)
    if not user:
        logger.info("Failed login for %s", username)
        raise BadRequestError("username or password is invalid")
    
    return _user_response(user, tokens.issue(user["id"]))


# =============================================================================
# Protected Endpoints
# =============================================================================

@router.get("/me")
async def get_current_user(
    ctx: AuthContext = Depends(require_auth()),
    users: UserStore = Depends(get_user_store),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Get the current authenticated user.
    """
    user = await users.get_user(ctx.user_id)
    if not user:
        raise NotFoundError(f"No user was found with the id of {ctx.user_id}")

    return _user_response(user, tokens.issue(user["id"]))
