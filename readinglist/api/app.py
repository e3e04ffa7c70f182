"""
FastAPI application for the reading list.

`create_app()` wires settings, storage and services onto `app.state`;
tests build their own app with a fresh storage provider.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from readinglist import __version__
from readinglist.api.errors import ErrorBoundaryMiddleware, setup_exception_handlers
from readinglist.api.list_items import router as list_items_router
from readinglist.auth import TokenService, UserStore, auth_router
from readinglist.config import Settings, configure_logging, get_settings
from readinglist.integrations.sentry import init_sentry
from readinglist.services.list_items import ListItemService
from readinglist.storage import StorageProvider, create_local_storage

logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings: Settings = app.state.settings
    
    if init_sentry(settings):
        logger.info("Sentry error tracking enabled")
    
    logger.info("Reading list API starting in %s mode", settings.environment)
    
    yield
    
    logger.info("Reading list API shutting down")


# =============================================================================
# App Setup
# =============================================================================


def create_app(
    settings: Settings | None = None,
    storage: StorageProvider | None = None,
) -> FastAPI:
    """Build the application around the given settings and storage."""
    settings = settings or get_settings()
    storage = storage or create_local_storage()
    configure_logging(settings.log_level)
    
    app = FastAPI(
        title="Reading List API",
        description="Keep track of the books you read, with notes and ratings",
        version=__version__,
        lifespan=lifespan,
    )
    
    app.state.settings = settings
    app.state.storage = storage
    app.state.token_service = TokenService.from_settings(settings)
    app.state.user_store = UserStore(storage.users, iterations=settings.password_hash_iterations)
    app.state.list_item_service = ListItemService(storage.list_items, storage.books)
    
    # The error boundary sits inside CORS so 500s still get CORS headers
    app.add_middleware(ErrorBoundaryMiddleware, debug=settings.debug)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_exception_handlers(app)
    
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(list_items_router, prefix=settings.api_prefix)
    
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "readinglist-api"}
    
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    
    settings = get_settings()
    uvicorn.run(
        "readinglist.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
