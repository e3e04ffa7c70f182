# =============================================================================
# JWT Authentication
# =============================================================================
#
# Stateless identity tokens:
#   - TokenService.issue(user_id)  -> signed token carrying the user id
#   - TokenService.verify(token)   -> user id, or a TokenError
#
# The secret and expiry come from the Settings handed to the constructor.
#
# =============================================================================

from __future__ import annotations

from datetime import timedelta
from typing import Any
import logging

import jwt

from readinglist.config import Settings
from readinglist.core.errors import ReadingListError
from readinglist.core.utils import utc_now

logger = logging.getLogger(__name__)


# =============================================================================
# Token Errors
# =============================================================================

class TokenError(ReadingListError):
    """Base exception for authentication failures. Always a 401."""
    
    status_code = 401
    code = "invalid_token"
    
    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code
    
    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class NoTokenError(TokenError):
    """No credentials were sent."""
    
    code = "credentials_required"
    
    def __init__(self, message: str = "No authorization token was found"):
        super().__init__(message)


class InvalidTokenError(TokenError):
    """Malformed, unsigned, tampered or expired token."""
    pass


# =============================================================================
# Token Service
# =============================================================================

class TokenService:
    """Issues and verifies signed tokens embedding a user id."""
    
    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        if not secret_key:
            raise ValueError("TokenService needs a secret key")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
    
    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        return cls(
            secret_key=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.jwt_expire_minutes,
        )
    
    def issue(self, user_id: str, expires_in: timedelta | None = None) -> str:
        """Create a signed token for `user_id`."""
        now = utc_now()
        expire = now + (expires_in if expires_in is not None else timedelta(minutes=self.expire_minutes))
        
        payload = {
            "sub": user_id,
            "exp": expire,
            "iat": now,
        }
        
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
    
    def verify(self, token: str | None) -> str:
        """
        Decode and validate a token.
        
        Returns:
            The user id the token was issued for
        
        Raises:
            NoTokenError: No token given
            InvalidTokenError: Bad signature, malformed, or expired
        """
        if not token:
            raise NoTokenError()
        
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("jwt expired")
        except jwt.InvalidTokenError as e:
            logger.debug("Rejected token: %s", e)
            raise InvalidTokenError(str(e) or "invalid token")
        
        user_id = payload["sub"]
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("token subject is not a user id")
        return user_id
