"""
In-memory storage for development and tests.

Works without any external services. Uniqueness constraints are checked
inside `create`/`update`, which never await, so two concurrent requests
cannot both slip past them.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from pydantic import BaseModel

from readinglist.core.errors import DuplicateRecordError
from readinglist.core.models import Book, ListItem, User
from readinglist.core.utils import generate_id
from readinglist.storage.base import Collections, Repository, StorageProvider

logger = logging.getLogger(__name__)


class InMemoryRepository(Repository):
    """Dict-backed repository. Records are copied in and out."""
    
    def __init__(
        self,
        name: str,
        model: type[BaseModel] | None = None,
        unique_together: tuple[str, ...] = (),
        id_prefix: str = "",
    ):
        self.name = name
        self.model = model
        self.unique_together = unique_together
        self.id_prefix = id_prefix
        self._data: dict[str, dict[str, Any]] = {}
    
    def _normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        if self.model is None:
            return copy.deepcopy(data)
        return self.model.model_validate(data).model_dump(by_alias=True, mode="json")
    
    def _check_unique(self, record: dict[str, Any], exclude_id: str | None = None) -> None:
        if not self.unique_together:
            return
        key = {field: record.get(field) for field in self.unique_together}
        for doc in self._data.values():
            if doc["id"] == exclude_id:
                continue
            if all(doc.get(field) == value for field, value in key.items()):
                raise DuplicateRecordError(self.name, key)
    
    async def read_by_id(self, id: str) -> dict[str, Any] | None:
        doc = self._data.get(id)
        return copy.deepcopy(doc) if doc is not None else None
    
    async def read_many_by_id(self, ids: list[str]) -> list[dict[str, Any]]:
        wanted = set(ids)
        return [copy.deepcopy(doc) for id, doc in self._data.items() if id in wanted]
    
    async def query(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        results = []
        for doc in self._data.values():
            if filters and any(doc.get(k) != v for k, v in filters.items()):
                continue
            results.append(copy.deepcopy(doc))
        return results
    
    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        record = self._normalize({"id": generate_id(self.id_prefix), **data})
        self._check_unique(record)
        self._data[record["id"]] = record
        logger.debug("Created %s record %s", self.name, record["id"])
        return copy.deepcopy(record)
    
    async def update(self, id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        if id not in self._data:
            return None
        record = self._normalize({**self._data[id], **updates, "id": id})
        self._check_unique(record, exclude_id=id)
        self._data[id] = record
        return copy.deepcopy(record)
    
    async def remove(self, id: str) -> bool:
        if id in self._data:
            del self._data[id]
            return True
        return False
    
    async def drop(self) -> None:
        self._data.clear()


# =============================================================================
# Factory
# =============================================================================


def create_local_storage() -> StorageProvider:
    """Create a StorageProvider with in-memory implementations."""
    return StorageProvider(
        users=InMemoryRepository(
            Collections.USERS, model=User, unique_together=("username",), id_prefix="user",
        ),
        books=InMemoryRepository(Collections.BOOKS, model=Book, id_prefix="book"),
        list_items=InMemoryRepository(
            Collections.LIST_ITEMS,
            model=ListItem,
            unique_together=("ownerId", "bookId"),
            id_prefix="item",
        ),
    )


async def reset_storage(storage: StorageProvider) -> None:
    """Empty every repository."""
    for repository in (storage.users, storage.books, storage.list_items):
        await repository.drop()
