"""
Error boundary for the HTTP layer.

- ReadingListError (incl. token errors) -> its own status and body
- Request validation failures            -> 400 {message}
- Anything else                          -> 500 {message, stack}, unless the
  response has already started, in which case the error is re-raised to
  the server instead of being written.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from readinglist.core.errors import ReadingListError
from readinglist.integrations.sentry import capture_exception

logger = logging.getLogger(__name__)


def unexpected_error_body(exc: BaseException, include_stack: bool = True) -> dict[str, Any]:
    body: dict[str, Any] = {"message": str(exc)}
    if include_stack:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


def validation_message(exc: RequestValidationError) -> str:
    """Collapse pydantic's error list into one line."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first['msg']}" if location else first["msg"]


class ErrorBoundaryMiddleware:
    """Outermost catch for errors no handler claimed."""
    
    def __init__(self, app: ASGIApp, debug: bool = True):
        self.app = app
        self.debug = debug
    
    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        
        response_started = False
        
        async def _send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)
        
        try:
            await self.app(scope, receive, _send)
        except Exception as exc:
            path = scope.get("path")
            if response_started:
                logger.error("Error after response started on %s: %s", path, exc)
                raise
            
            logger.exception("Unhandled error on %s %s", scope.get("method"), path)
            capture_exception(exc, path=path)
            response = JSONResponse(
                status_code=500,
                content=unexpected_error_body(exc, include_stack=self.debug),
            )
            await response(scope, receive, send)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with FastAPI app."""
    
    @app.exception_handler(ReadingListError)
    async def reading_list_error_handler(request: Request, exc: ReadingListError):
        logger.warning(
            "%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message,
        )
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)
    
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = validation_message(exc)
        logger.warning("%s %s -> 400: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=400, content={"message": message})
    
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )
