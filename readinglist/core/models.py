"""
Data models for the reading list.

Records travel through the stores and over the wire as plain dicts with
camelCase keys; these models validate and normalise them on the way in.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from readinglist.core.utils import utc_now


class WireModel(BaseModel):
    """Base model that reads and writes camelCase keys."""
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    
    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# Stored entities
# =============================================================================


class User(WireModel):
    """A registered user as stored. Never returned with the hash."""
    id: str
    username: str
    password_hash: str


class Book(WireModel):
    """A catalog book. Owned by the book collaborator, read-only here."""
    
    model_config = ConfigDict(extra="allow")
    
    id: str
    title: str
    author: str


class ListItem(WireModel):
    """
    A user's entry for one book.
    
    At most one per (owner_id, book_id). owner_id never changes after
    creation.
    """
    id: str
    owner_id: str
    book_id: str
    notes: str = ""
    rating: int | None = Field(None, ge=-1, le=5)
    start_date: datetime = Field(default_factory=utc_now)
    finish_date: datetime | None = None


# =============================================================================
# Request bodies
# =============================================================================


class UserCredentials(WireModel):
    """Register/login form. Blank fields are reported by the routes."""
    username: str | None = None
    password: str | None = None


class ListItemCreate(WireModel):
    book_id: str | None = None


class ListItemUpdate(WireModel):
    """
    Partial update for a list item.
    
    Unknown keys, including ownerId and id, are dropped. Fields the stored
    item requires may be left out but not sent as null.
    """
    
    model_config = ConfigDict(extra="ignore")
    
    book_id: str | None = None
    notes: str | None = None
    rating: int | None = Field(None, ge=-1, le=5)
    start_date: datetime | None = None
    finish_date: datetime | None = None
    
    @field_validator("book_id", "notes", "start_date", mode="before")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value
    
    def changes(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)
