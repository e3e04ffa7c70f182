"""
Core types shared across the reading list application.
"""

from readinglist.core.errors import (
    ReadingListError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    DuplicateRecordError,
)
from readinglist.core.models import (
    Book,
    ListItem,
    ListItemCreate,
    ListItemUpdate,
    UserCredentials,
)

__all__ = [
    "ReadingListError",
    "BadRequestError",
    "ForbiddenError",
    "NotFoundError",
    "DuplicateRecordError",
    "Book",
    "ListItem",
    "ListItemCreate",
    "ListItemUpdate",
    "UserCredentials",
]
