"""
Authentication and ownership enforcement.

1. Tokens prove who the caller is (`TokenService`, `require_auth`)
2. Records prove who may touch them (`load_owned_resource`)
"""

from readinglist.auth.context import AuthContext
from readinglist.auth.policies import (
    require_auth,
    optional_auth,
    get_bearer_token,
)
from readinglist.auth.jwt import (
    TokenService,
    TokenError,
    NoTokenError,
    InvalidTokenError,
)
from readinglist.auth.passwords import (
    is_password_allowed,
    hash_password,
    verify_password,
)
from readinglist.auth.ownership import load_owned_resource
from readinglist.auth.users import UserStore, public_user
from readinglist.auth.routes import router as auth_router

__all__ = [
    # Main interface
    "require_auth",
    "optional_auth",
    "get_bearer_token",
    "AuthContext",
    "load_owned_resource",
    # Tokens
    "TokenService",
    "TokenError",
    "NoTokenError",
    "InvalidTokenError",
    # Passwords and users
    "is_password_allowed",
    "hash_password",
    "verify_password",
    "UserStore",
    "public_user",
    # Router
    "auth_router",
]
