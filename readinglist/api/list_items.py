"""
List-item routes.

    GET    /list-items        - caller's items with books
    POST   /list-items        - start an item for a book
    GET    /list-items/{id}   - one item (owner only)
    PUT    /list-items/{id}   - partial update (owner only)
    DELETE /list-items/{id}   - remove (owner only)
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from readinglist.auth.context import AuthContext
from readinglist.auth.policies import require_auth
from readinglist.core.models import ListItemCreate, ListItemUpdate
from readinglist.services.list_items import ListItemService

router = APIRouter(prefix="/list-items", tags=["list-items"])


def get_list_item_service(request: Request) -> ListItemService:
    return request.app.state.list_item_service


async def set_list_item(
    id: str,
    ctx: AuthContext = Depends(require_auth()),
    service: ListItemService = Depends(get_list_item_service),
) -> dict[str, Any]:
    """Resolve the `{id}` path parameter to an item the caller owns."""
    return await service.set_list_item(ctx, id)


@router.get("")
async def get_list_items(
    ctx: AuthContext = Depends(require_auth()),
    service: ListItemService = Depends(get_list_item_service),
):
    return await service.get_list_items(ctx)


@router.post("")
async def create_list_item(
    data: ListItemCreate | None = None,
    ctx: AuthContext = Depends(require_auth()),
    service: ListItemService = Depends(get_list_item_service),
):
    return await service.create_list_item(ctx, (data or ListItemCreate()).to_record())


@router.get("/{id}")
async def get_list_item(
    ctx: AuthContext = Depends(require_auth()),
    list_item: dict = Depends(set_list_item),
    service: ListItemService = Depends(get_list_item_service),
):
    return await service.get_list_item(ctx, list_item)


@router.put("/{id}")
async def update_list_item(
    data: ListItemUpdate,
    ctx: AuthContext = Depends(require_auth()),
    list_item: dict = Depends(set_list_item),
    service: ListItemService = Depends(get_list_item_service),
):
    return await service.update_list_item(ctx, list_item, data.changes())


@router.delete("/{id}")
async def delete_list_item(
    ctx: AuthContext = Depends(require_auth()),
    list_item: dict = Depends(set_list_item),
    service: ListItemService = Depends(get_list_item_service),
):
    return await service.delete_list_item(ctx, list_item)
