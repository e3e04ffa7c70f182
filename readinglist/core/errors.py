"""
Application errors.

Every error the core raises on purpose carries its HTTP status, so the
API layer can translate it without knowing where it came from.
"""

from __future__ import annotations

from typing import Any


class ReadingListError(Exception):
    """Base class for errors that map onto a client-facing response."""
    
    status_code: int = 500
    
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
    
    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


class BadRequestError(ReadingListError):
    """Missing or invalid input, or a duplicate resource."""
    status_code = 400


class ForbiddenError(ReadingListError):
    """Authenticated, but not allowed to touch this resource."""
    status_code = 403


class NotFoundError(ReadingListError):
    """The requested resource does not exist."""
    status_code = 404


class DuplicateRecordError(ReadingListError):
    """A store-level uniqueness constraint was violated."""
    
    status_code = 400
    
    def __init__(self, collection: str, fields: dict[str, Any]):
        self.collection = collection
        self.fields = fields
        pairs = ", ".join(f"{k}={v}" for k, v in fields.items())
        super().__init__(f"Duplicate {collection} record: {pairs}")
