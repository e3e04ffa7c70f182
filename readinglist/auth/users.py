"""
Credential store.

Creates and looks up users on top of any `Repository`. Password hashes
never leave this module: every method returns the public view.
"""

from __future__ import annotations

import logging
from typing import Any

from readinglist.auth.passwords import hash_password, verify_password
from readinglist.core.errors import BadRequestError, DuplicateRecordError
from readinglist.storage.base import Repository

logger = logging.getLogger(__name__)


def public_user(record: dict[str, Any]) -> dict[str, Any]:
    """Strip the password hash from a stored user."""
    return {k: v for k, v in record.items() if k != "passwordHash"}


class UserStore:
    """Users keyed by a unique username."""
    
    def __init__(self, repository: Repository, iterations: int = 100_000):
        self.repository = repository
        self.iterations = iterations
    
    async def _find_by_username(self, username: str) -> dict[str, Any] | None:
        matches = await self.repository.query({"username": username})
        return matches[0] if matches else None
    
    async def create_user(self, username: str, password: str) -> dict[str, Any]:
        """
        Register a user.
        
        Raises:
            BadRequestError: The username is taken
        """
        if await self._find_by_username(username):
            raise BadRequestError("username taken")
        
        try:
            record = await self.repository.create({
                "username": username,
                "passwordHash": hash_password(password, self.iterations),
            })
        except DuplicateRecordError:
            raise BadRequestError("username taken")
        
        logger.info("Registered user %s", record["id"])
        return public_user(record)
    
    async def authenticate(self, username: str, password: str) -> dict[str, Any] | None:
        """Return the user if the credentials match."""
        record = await self._find_by_username(username)
        if not record:
            return None
        if not verify_password(password, record["passwordHash"]):
            return None
        return public_user(record)
    
    async def get_user(self, user_id: str) -> dict[str, Any] | None:
        record = await self.repository.read_by_id(user_id)
        return public_user(record) if record else None
