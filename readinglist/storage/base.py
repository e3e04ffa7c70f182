"""
Storage abstraction layer.

All persistence goes through these interfaces. The auth and list-item
code is written against `Repository` only, so an in-memory store, a SQL
table or a remote catalog service can be swapped in without touching it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


# =============================================================================
# Repository Interface
# =============================================================================


class Repository(ABC):
    """
    One collection of records (users, books, list items).
    
    Records are plain dicts keyed by their wire names and always carry
    an "id".
    """
    
    @abstractmethod
    async def read_by_id(self, id: str) -> dict[str, Any] | None:
        """Get a record by ID, or None."""
        pass
    
    @abstractmethod
    async def read_many_by_id(self, ids: list[str]) -> list[dict[str, Any]]:
        """Get every record whose ID is in `ids`. Order is not guaranteed."""
        pass
    
    @abstractmethod
    async def query(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Records whose fields equal every value in `filters`."""
        pass
    
    @abstractmethod
    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a record, assigning an ID. Returns the stored record."""
        pass
    
    @abstractmethod
    async def update(self, id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        """Merge `updates` into a record. Returns the result, or None if absent."""
        pass
    
    @abstractmethod
    async def remove(self, id: str) -> bool:
        """Delete a record."""
        pass
    
    @abstractmethod
    async def drop(self) -> None:
        """Delete every record."""
        pass


# =============================================================================
# Storage Provider (dependency injection container)
# =============================================================================


class StorageProvider(BaseModel):
    """
    Container for all repositories.
    
    Initialize once at app startup with appropriate implementations.
    """
    
    model_config = {"arbitrary_types_allowed": True}
    
    users: Repository
    books: Repository
    list_items: Repository


class Collections:
    """Standard collection/table names."""
    
    USERS = "users"
    BOOKS = "books"
    LIST_ITEMS = "list_items"
