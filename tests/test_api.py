"""Integration tests for the HTTP surface.

Uses httpx AsyncClient over ASGITransport. The app lifespan does not run,
so the FunctionRuntime is placed on app.state directly, wired to the mocked
notion-client SDK from conftest. Settings are overridden per test through
the environment and the get_settings cache.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.notion_bridge.config import get_settings
from src.notion_bridge.functions.runtime import FunctionRuntime
from src.notion_bridge.main import create_app


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate each test from the process environment and the settings cache."""
    for name in (
        "ENVIRONMENT", "NOTION_TOKEN", "SLACK_BOT_TOKEN", "FUNCTION_API_KEY", "SENTRY_DSN"
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def client(monkeypatch, settings, notion_client, notion_sdk, database_payload):
    """Test client whose function runtime talks to the mocked Notion SDK."""
    monkeypatch.setenv("NOTION_TOKEN", "secret_test")
    notion_sdk.databases.retrieve.return_value = database_payload

    app = create_app()
    app.state.function_runtime = FunctionRuntime(
        settings,
        notion_client_factory=lambda s: notion_client,
        slack_client_factory=lambda s: MagicMock(),
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ── Health ──────────────────────────────────────────────────────────────────


class TestHealth:
    async def test_liveness(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "environment": "development"}
        assert "X-Request-ID" in response.headers

    async def test_ready_with_notion_token(self, client):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"] == {"notion_token": "ok", "slack_token": "missing"}

    async def test_not_ready_without_notion_token(self, client, monkeypatch):
        monkeypatch.delenv("NOTION_TOKEN")
        get_settings.cache_clear()

        response = await client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"

    async def test_metrics_exposed(self, client):
        await client.get("/health")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text


# ── Functions ───────────────────────────────────────────────────────────────


class TestFunctionEndpoints:
    async def test_create_notion_item(self, client, notion_sdk):
        notion_sdk.pages.create.return_value = {
            "id": "page-new",
            "url": "https://www.notion.so/page-new",
        }

        response = await client.post(
            "/functions/create_notion_item",
            json={
                "inputs": {
                    "database_id": "db-123",
                    "field1_name": "Title",
                    "field1_value": "From HTTP",
                    "field2_name": "Status",
                    "field2_value": "Open",
                }
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "page_id": "page-new",
            "page_url": "https://www.notion.so/page-new",
        }
        properties = notion_sdk.pages.create.await_args.kwargs["properties"]
        assert properties["Status"] == {"type": "select", "select": {"name": "Open"}}

    async def test_failure_reported_in_body(self, client, notion_sdk):
        response = await client.post(
            "/functions/create_notion_item",
            json={"inputs": {"database_id": "db-123", "field1_name": "Status", "field1_value": "x"}},
        )

        assert response.status_code == 200
        assert response.json() == {"success": False, "error": 'Title field "Title" is required'}
        notion_sdk.pages.create.assert_not_awaited()

    async def test_update_notion_item(self, client, notion_sdk):
        notion_sdk.pages.retrieve.return_value = {
            "id": "page-1",
            "parent": {"type": "database_id", "database_id": "db-123"},
        }
        notion_sdk.pages.update.return_value = {"id": "page-1", "url": "https://www.notion.so/page-1"}

        response = await client.post(
            "/functions/update_notion_item",
            json={"inputs": {"page_id": "page-1", "field1_name": "Priority", "field1_value": "2"}},
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert notion_sdk.pages.update.await_args.kwargs["properties"] == {
            "Priority": {"type": "number", "number": 2.0}
        }

    async def test_empty_body_inputs(self, client):
        response = await client.post("/functions/update_notion_item", json={})

        assert response.status_code == 200
        assert response.json() == {"success": False, "error": "page_id is required"}


class TestApiKey:
    async def test_missing_key_rejected(self, client, monkeypatch):
        monkeypatch.setenv("FUNCTION_API_KEY", "s3cret")
        get_settings.cache_clear()

        response = await client.post("/functions/create_notion_item", json={"inputs": {}})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or missing API key"

    async def test_wrong_key_rejected(self, client, monkeypatch):
        monkeypatch.setenv("FUNCTION_API_KEY", "s3cret")
        get_settings.cache_clear()

        response = await client.post(
            "/functions/create_notion_item",
            json={"inputs": {}},
            headers={"X-API-Key": "wrong"},
        )

        assert response.status_code == 401

    async def test_correct_key_accepted(self, client, monkeypatch):
        monkeypatch.setenv("FUNCTION_API_KEY", "s3cret")
        get_settings.cache_clear()

        response = await client.post(
            "/functions/create_notion_item",
            json={"inputs": {}},
            headers={"X-API-Key": "s3cret"},
        )

        assert response.status_code == 200
        assert response.json()["error"] == "database_id is required"

    async def test_non_ascii_key_rejected(self, client, monkeypatch):
        monkeypatch.setenv("FUNCTION_API_KEY", "s3cret")
        get_settings.cache_clear()

        response = await client.post(
            "/functions/create_notion_item",
            json={"inputs": {}},
            headers=[(b"X-API-Key", b"caf\xe9")],
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or missing API key"

    async def test_non_ascii_configured_key_accepted(self, client, monkeypatch):
        monkeypatch.setenv("FUNCTION_API_KEY", "café")
        get_settings.cache_clear()

        response = await client.post(
            "/functions/create_notion_item",
            json={"inputs": {}},
            headers=[(b"X-API-Key", "café".encode("latin-1"))],
        )

        assert response.status_code == 200

    async def test_health_not_protected(self, client, monkeypatch):
        monkeypatch.setenv("FUNCTION_API_KEY", "s3cret")
        get_settings.cache_clear()

        response = await client.get("/health")

        assert response.status_code == 200
