"""
Storage abstractions.

- Repository → one collection (users, books, list items)
- StorageProvider → the set of repositories the app runs against
"""

from readinglist.storage.base import (
    Repository,
    StorageProvider,
    Collections,
)
from readinglist.storage.local import (
    InMemoryRepository,
    create_local_storage,
    reset_storage,
)

__all__ = [
    "Repository",
    "StorageProvider",
    "Collections",
    "InMemoryRepository",
    "create_local_storage",
    "reset_storage",
]
