"""
Integration tests for CORS and access logging.
"""

import logging
from dataclasses import replace

import pytest
from httpx import AsyncClient, ASGITransport

from bookstore.api.main import create_app

pytestmark = pytest.mark.asyncio

ACCESS_LOGGER = "bookstore.access"


def access_lines(caplog) -> list[str]:
    return [r.getMessage() for r in caplog.records if r.name == ACCESS_LOGGER]


class TestCors:

    async def test_preflight_from_dev_frontend(self, client):
        response = await client.options(
            "/api/books",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Authorization, Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert response.headers["access-control-allow-credentials"] == "true"

    async def test_production_rejects_dev_origin(self, test_settings):
        settings = replace(test_settings, environment="production")
        application = create_app(settings, services=["books"])
        transport = ASGITransport(app=application)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/books", headers={"Origin": "http://localhost:3000"})

        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers
        application.state.services.close()


class TestAccessLog:

    async def test_one_line_per_request(self, client, caplog, sample_book_data):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            response = await client.post(
                "/api/books",
                json=sample_book_data,
                headers={"X-Request-ID": "rid-42"},
            )

        assert response.headers["X-Request-ID"] == "rid-42"
        lines = access_lines(caplog)
        assert len(lines) == 1
        assert lines[0].startswith("POST /api/books -> 201 (")
        assert "rid=rid-42" in lines[0]

    async def test_client_errors_are_warnings(self, client, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            await client.get("/api/books/not-a-valid-id")

        records = [r for r in caplog.records if r.name == ACCESS_LOGGER]
        assert records[0].levelno == logging.WARNING
        assert "-> 400" in records[0].getMessage()

    async def test_health_is_not_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            response = await client.get("/health")

        assert response.status_code == 200
        assert "X-Request-ID" in response.headers
        assert access_lines(caplog) == []

    async def test_debug_logs_redacted_bodies(self, test_settings, caplog, sample_user_data):
        application = create_app(replace(test_settings, debug=True), services=["users"])
        transport = ASGITransport(app=application)
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                await ac.post("/api/users/register", json=sample_user_data)

        lines = access_lines(caplog)
        assert '"password":"[REDACTED]"' in lines[0]
        assert sample_user_data["password"] not in lines[0]
        application.state.services.close()
