"""
Policies - the auth gate in front of routes.

    ctx: AuthContext = Depends(require_auth())    # 401 without a valid token
    ctx: AuthContext = Depends(optional_auth())   # anonymous without a header

A header that is present is always verified, on optional routes too.
Both factories return the same callable on every call, so FastAPI
resolves the identity once per request however many dependencies ask.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Callable

from fastapi import Request

from readinglist.auth.context import AuthContext
from readinglist.auth.jwt import InvalidTokenError, NoTokenError, TokenService


# =============================================================================
# Token Extraction
# =============================================================================


def get_bearer_token(request: Request) -> str | None:
    """
    Pull the bearer token out of the Authorization header.
    
    Returns None when the header is missing or blank.

    Raises:
        InvalidTokenError: The header is not "Bearer <token>"
    """
    header = request.headers.get("authorization")
    if not header or not header.strip():
        return None
    
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise InvalidTokenError(
            "Format is Authorization: Bearer [token]",
            code="credentials_bad_scheme",
        )
    return parts[1]


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


# =============================================================================
# Main Interface
# =============================================================================


@lru_cache
def require_auth() -> Callable:
    """Deny the route unless the request carries a valid token."""
    return _create_dependency(credentials_required=True)


@lru_cache
def optional_auth() -> Callable:
    """Attach an identity if a token is sent; stay anonymous otherwise."""
    return _create_dependency(credentials_required=False)


def _create_dependency(credentials_required: bool) -> Callable:
    """Create a FastAPI Depends that resolves to AuthContext."""
    
    async def dependency(request: Request) -> AuthContext:
        token = get_bearer_token(request)
        
        if token is None:
            if credentials_required:
                raise NoTokenError()
            return AuthContext.anonymous()
        
        user_id = get_token_service(request).verify(token)
        return AuthContext(user_id=user_id)
    
    return dependency
