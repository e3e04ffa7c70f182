"""
Tests for the HTTP error boundary.
"""

import pytest
from httpx import AsyncClient, ASGITransport

from readinglist.api.app import create_app
from readinglist.api.errors import ErrorBoundaryMiddleware

pytestmark = pytest.mark.asyncio


def _scope(path: str = "/boom") -> dict:
    return {"type": "http", "method": "GET", "path": path, "headers": []}


async def _receive():
    return {"type": "http.request", "body": b"", "more_body": False}


class TestErrorBoundaryMiddleware:
    async def test_unhandled_error_becomes_500(self):
        async def failing_app(scope, receive, send):
            raise RuntimeError("some error")
        
        sent = []
        
        async def send(message):
            sent.append(message)
        
        await ErrorBoundaryMiddleware(failing_app)(_scope(), _receive, send)
        
        assert sent[0]["type"] == "http.response.start"
        assert sent[0]["status"] == 500
        assert b'"message":"some error"' in sent[1]["body"]
        assert b"RuntimeError" in sent[1]["body"]

    async def test_error_after_headers_sent_is_forwarded(self):
        async def half_sent_app(scope, receive, send):
            await send({"type": "http.response.start", "status": 200, "headers": []})
            raise RuntimeError("some error")
        
        sent = []
        
        async def send(message):
            sent.append(message)
        
        with pytest.raises(RuntimeError, match="some error"):
            await ErrorBoundaryMiddleware(half_sent_app)(_scope(), _receive, send)
        
        # Nothing written after the original start message
        assert [m["type"] for m in sent] == ["http.response.start"]

    async def test_non_http_scopes_pass_through(self):
        calls = []
        
        async def lifespan_app(scope, receive, send):
            calls.append(scope["type"])
        
        await ErrorBoundaryMiddleware(lifespan_app)({"type": "lifespan"}, _receive, None)
        
        assert calls == ["lifespan"]


class TestAppErrorResponses:
    @staticmethod
    def _app_with_failing_route(settings, storage):
        app = create_app(settings=settings, storage=storage)
        
        @app.get("/boom")
        async def boom():
            raise RuntimeError("some error")
        
        return app

    async def test_route_error_has_message_and_stack(self, settings, storage):
        app = self._app_with_failing_route(settings, storage)
        
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/boom")
        
        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "some error"
        assert "RuntimeError" in body["stack"]

    async def test_stack_hidden_without_debug(self, settings, storage):
        app = self._app_with_failing_route(settings.model_copy(update={"debug": False}), storage)
        
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/boom")
        
        assert response.status_code == 500
        assert response.json() == {"message": "some error"}

    async def test_unknown_route_uses_message_shape(self, client):
        response = await client.get("/no-such-route")
        
        assert response.status_code == 404
        assert response.json() == {"message": "Not Found"}

    async def test_invalid_body_is_400(self, auth_client):
        response = await auth_client.post("/list-items", content=b"{not json", headers={"Content-Type": "application/json"})
        
        assert response.status_code == 400
        assert "message" in response.json()
