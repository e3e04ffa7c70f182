"""
List-item operations.

Every method takes the caller's AuthContext explicitly. Methods that act
on an existing item expect it to have come through `set_list_item`,
which is where ownership is enforced; `create_list_item` has nothing to
guard yet and enforces the one-item-per-book rule instead.
"""

from __future__ import annotations

import logging
from typing import Any

from readinglist.auth.context import AuthContext
from readinglist.auth.ownership import load_owned_resource
from readinglist.core.errors import BadRequestError, DuplicateRecordError, NotFoundError
from readinglist.storage.base import Repository

logger = logging.getLogger(__name__)

RESOURCE_NAME = "list item"


def _duplicate_error(ctx: AuthContext, book_id: str) -> BadRequestError:
    return BadRequestError(
        f"User {ctx.user_id} already has a list item for the book with the ID {book_id}"
    )


class ListItemService:
    """Reads and writes list items, joining each with its book."""
    
    def __init__(self, list_items: Repository, books: Repository):
        self.list_items = list_items
        self.books = books
    
    # =========================================================================
    # Guard
    # =========================================================================
    
    async def set_list_item(self, ctx: AuthContext, list_item_id: str) -> dict[str, Any]:
        """Load a list item the caller owns (404, then 403)."""
        return await load_owned_resource(self.list_items, list_item_id, ctx, RESOURCE_NAME)
    
    # =========================================================================
    # Reads
    # =========================================================================
    
    async def _with_book(self, list_item: dict[str, Any]) -> dict[str, Any]:
        book = await self.books.read_by_id(list_item["bookId"])
        return {**list_item, "book": book}
    
    async def get_list_item(self, ctx: AuthContext, list_item: dict[str, Any]) -> dict[str, Any]:
        return {"listItem": await self._with_book(list_item)}
    
    async def get_list_items(self, ctx: AuthContext) -> dict[str, Any]:
        """
        All of the caller's items, in store order, each with its book.
        
        Books come back in whatever order the store likes, so they are
        joined by id.
        """
        list_items = await self.list_items.query({"ownerId": ctx.user_id})
        book_ids = list({item["bookId"] for item in list_items})
        books = await self.books.read_many_by_id(book_ids) if book_ids else []
        books_by_id = {book["id"]: book for book in books}
        
        return {
            "listItems": [
                {**item, "book": books_by_id.get(item["bookId"])}
                for item in list_items
            ]
        }
    
    # =========================================================================
    # Writes
    # =========================================================================
    
    async def create_list_item(self, ctx: AuthContext, body: dict[str, Any]) -> dict[str, Any]:
        """
        Start a list item for a book.
        
        Raises:
            BadRequestError: No bookId, or the user already has an item
                for this book
        """
        book_id = body.get("bookId")
        if not book_id:
            raise BadRequestError("No bookId provided")
        
        duplicate = _duplicate_error(ctx, book_id)
        
        existing = await self.list_items.query({"ownerId": ctx.user_id, "bookId": book_id})
        if existing:
            raise duplicate
        
        # The query above and this insert can interleave with another
        # request; the store's (ownerId, bookId) constraint catches that.
        try:
            list_item = await self.list_items.create({"ownerId": ctx.user_id, "bookId": book_id})
        except DuplicateRecordError:
            logger.warning("Concurrent create for user %s book %s", ctx.user_id, book_id)
            raise duplicate
        
        logger.info("User %s created list item %s", ctx.user_id, list_item["id"])
        return {"listItem": await self._with_book(list_item)}
    
    async def update_list_item(
        self,
        ctx: AuthContext,
        list_item: dict[str, Any],
        updates: dict[str, Any],
    ) -> dict[str, Any]:
        """Merge `updates` into an already-guarded item. ownerId never changes."""
        updates = {k: v for k, v in updates.items() if k not in ("id", "ownerId")}
        
        try:
            updated = await self.list_items.update(list_item["id"], updates)
        except DuplicateRecordError:
            raise _duplicate_error(ctx, updates.get("bookId"))
        if updated is None:
            raise NotFoundError(f"No {RESOURCE_NAME} was found with the id of {list_item['id']}")
        book = await self.books.read_by_id(list_item["bookId"])
        return {"listItem": {**updated, "book": book}}
    
    async def delete_list_item(self, ctx: AuthContext, list_item: dict[str, Any]) -> dict[str, Any]:
        await self.list_items.remove(list_item["id"])
        logger.info("User %s deleted list item %s", ctx.user_id, list_item["id"])
        return {"success": True}
