"""
Resource loading with an ownership check.

Existence is checked before ownership, so a caller probing an id that
does not exist gets a 404 whoever they are, and a 403 always means the
record is real but belongs to someone else.
"""

from __future__ import annotations

import logging
from typing import Any

from readinglist.auth.context import AuthContext
from readinglist.core.errors import ForbiddenError, NotFoundError
from readinglist.storage.base import Repository

logger = logging.getLogger(__name__)


async def load_owned_resource(
    repository: Repository,
    resource_id: str,
    ctx: AuthContext,
    resource_name: str,
) -> dict[str, Any]:
    """
    Load a record and make sure `ctx` owns it.
    
    Raises:
        NotFoundError: No record with that id
        ForbiddenError: The record belongs to another user
    """
    resource = await repository.read_by_id(resource_id)
    if resource is None:
        raise NotFoundError(f"No {resource_name} was found with the id of {resource_id}")
    
    if not ctx.owns(resource):
        logger.info(
            "User %s denied access to %s %s", ctx.user_id, resource_name, resource_id,
        )
        raise ForbiddenError(
            f"User with id {ctx.user_id} is not authorized to access the {resource_name} {resource_id}"
        )
    
    return resource

