"""
Blog API Backend — Middleware Tests
=====================================

What:  Tests for the CORS/preflight filter, request IDs and access logging.

What we test:
    ✅ OPTIONS on any path answers 204 with an empty body and never reaches a handler
    ✅ CORS headers on success and error responses
    ✅ X-Request-ID echoed or generated
    ✅ Access log level follows the status code; lines carry the route template
    ✅ Unmapped exceptions answer 500 with CORS and request-ID headers
"""

import logging
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from blogapi.main import create_app

EXPECTED_CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, POST, PUT, DELETE, OPTIONS",
    "access-control-allow-headers": "Content-Type, Authorization",
}


def assert_cors(response):
    for header, value in EXPECTED_CORS.items():
        assert response.headers[header] == value


class TestCORS:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        ["/api/posts", "/api/posts/65f1c0ffee0ddba11ca7b0b5", "/api/posts/not-an-id", "/nowhere"],
    )
    async def test_options_short_circuits_with_204(self, test_client, memory_store, path):
        response = await test_client.options(
            path,
            headers={"Origin": "http://example.com", "Access-Control-Request-Method": "PUT"},
        )

        assert response.status_code == 204
        assert response.content == b""
        assert_cors(response)
        assert memory_store.calls == []

    @pytest.mark.asyncio
    async def test_headers_on_success(self, test_client):
        response = await test_client.get("/api/posts")
        assert response.status_code == 200
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_headers_on_error_responses(self, test_client):
        bad_id = await test_client.get("/api/posts/not-a-valid-id")
        missing = await test_client.delete("/api/posts/65f1c0ffee0ddba11ca7b0b5")

        assert bad_id.status_code == 400
        assert missing.status_code == 404
        assert_cors(bad_id)
        assert_cors(missing)


class TestRequestID:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/api/posts")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_value_echoed(self, test_client):
        response = await test_client.get("/api/posts", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_success_logged_at_info(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="blogapi.access"):
            await test_client.get("/api/posts", headers={"X-Request-ID": "abc"})

        records = [r for r in caplog.records if r.name == "blogapi.access"]
        assert len(records) == 1
        assert records[0].levelno == logging.INFO
        assert records[0].request_id == "abc"
        assert records[0].path == "/api/posts"

    @pytest.mark.asyncio
    async def test_client_error_logged_at_warning(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="blogapi.access"):
            await test_client.get("/api/posts/not-a-valid-id")

        records = [r for r in caplog.records if r.name == "blogapi.access"]
        assert records[-1].levelno == logging.WARNING
        assert records[-1].status == 400

    @pytest.mark.asyncio
    async def test_health_not_logged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="blogapi.access"):
            await test_client.get("/health")

        assert not [r for r in caplog.records if r.name == "blogapi.access"]

    @pytest.mark.asyncio
    async def test_route_template_and_operation_logged(self, test_client, caplog):
        post_id = "65f1c0ffee0ddba11ca7b0b5"
        with caplog.at_level(logging.INFO, logger="blogapi.access"):
            await test_client.get(f"/api/posts/{post_id}")

        record = [r for r in caplog.records if r.name == "blogapi.access"][-1]
        assert record.path == "/api/posts/{post_id}"
        assert record.operation == "get_post"
        assert record.post_id == post_id
        assert record.status == 404

    @pytest.mark.asyncio
    async def test_unrouted_request_logs_raw_path(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="blogapi.access"):
            await test_client.get("/nowhere")

        record = [r for r in caplog.records if r.name == "blogapi.access"][-1]
        assert record.path == "/nowhere"
        assert record.operation is None


class TestUnhandledErrors:

    @pytest.mark.asyncio
    async def test_unmapped_exception_keeps_cors_and_request_id(self, memory_store, test_settings):
        memory_store.find_many = AsyncMock(side_effect=RuntimeError("boom"))
        app = create_app(document_store=memory_store, app_settings=test_settings)
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/posts")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert_cors(response)
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_unmapped_exception_logged_with_traceback(self, memory_store, test_settings, caplog):
        memory_store.find_many = AsyncMock(side_effect=RuntimeError("boom"))
        app = create_app(document_store=memory_store, app_settings=test_settings)
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        with caplog.at_level(logging.ERROR, logger="blogapi"):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                await client.get("/api/posts")

        errors = [r for r in caplog.records if r.name == "blogapi.middleware.cors"]
        assert len(errors) == 1
        assert errors[0].exc_info is not None
        access = [r for r in caplog.records if r.name == "blogapi.access"]
        assert access[-1].status == 500
