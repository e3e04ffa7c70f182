"""
Application services.
"""

from readinglist.services.list_items import ListItemService

__all__ = ["ListItemService"]
