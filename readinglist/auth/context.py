"""
Auth context - who is making the request.

Built once per request by the auth dependencies and passed explicitly to
the guard and the list-item service. Frozen, so no stage can change the
identity another stage sees.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthContext:
    """
    Identity for one request.
    
    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_auth())):
            print(f"User {ctx.user_id} is asking")
    """
    
    user_id: str | None = None
    
    @property
    def is_authenticated(self) -> bool:
        """Is there a logged-in user?"""
        return self.user_id is not None
    
    def owns(self, resource: dict) -> bool:
        """Is this user the resource's owner?"""
        return self.is_authenticated and resource.get("ownerId") == self.user_id
    
    @classmethod
    def anonymous(cls) -> AuthContext:
        """Create an anonymous context (no user)."""
        return cls()
