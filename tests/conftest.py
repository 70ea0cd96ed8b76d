"""Shared fixtures for Notion item bridge tests.

Provides:
- A writable task-database schema (Title, Status, Priority, Assignee, DueDate)
- FakeUserMapping: deterministic Slack -> Notion user mapping stand-in
- Mock notion-client AsyncClient factory and a NotionClient wired to it
- response_error: notion-client HTTPResponseError stand-in
- Test Settings that never read the developer's .env
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from notion_client.errors import HTTPResponseError

from src.notion_bridge.config import Settings
from src.notion_bridge.notion.client import NotionClient
from src.notion_bridge.notion.schemas import DatabaseProperty
from src.notion_bridge.users.schemas import UserMappingResult


# ── Schema ──────────────────────────────────────────────────────────────────


@pytest.fixture
def task_properties() -> list[DatabaseProperty]:
    """Writable properties of a typical task database."""
    return [
        DatabaseProperty(id="title", name="Title", type="title"),
        DatabaseProperty(id="s1", name="Status", type="select"),
        DatabaseProperty(id="p1", name="Priority", type="number"),
        DatabaseProperty(id="a1", name="Assignee", type="people"),
        DatabaseProperty(id="d1", name="DueDate", type="date"),
    ]


@pytest.fixture
def database_payload() -> dict:
    """Raw GET /databases/{id} payload including read-only properties."""
    return {
        "object": "database",
        "id": "db-123",
        "title": [{"text": {"content": "Tasks"}}],
        "properties": {
            "Title": {"id": "title", "name": "Title", "type": "title"},
            "Status": {"id": "s1", "name": "Status", "type": "select"},
            "Priority": {"id": "p1", "name": "Priority", "type": "number"},
            "Assignee": {"id": "a1", "name": "Assignee", "type": "people"},
            "DueDate": {"id": "d1", "name": "DueDate", "type": "date"},
            "Created": {"id": "c1", "name": "Created", "type": "created_time"},
            "Created by": {"id": "c2", "name": "Created by", "type": "created_by"},
            "Edited": {"id": "e1", "name": "Edited", "type": "last_edited_time"},
            "Edited by": {"id": "e2", "name": "Edited by", "type": "last_edited_by"},
        },
    }


# ── User Mapping Stand-in ───────────────────────────────────────────────────


class FakeUserMapping:
    """UserMappingFunction backed by a fixed Slack -> Notion table."""

    def __init__(self, table: dict[str, str] | None = None) -> None:
        self.table = table or {}
        self.single_calls: list[str] = []
        self.multiple_calls: list[str] = []

    def _map(self, slack_user_id: str) -> UserMappingResult:
        notion_user_id = self.table.get(slack_user_id)
        if notion_user_id is None:
            return UserMappingResult(
                slack_user_id=slack_user_id,
                error=f"No Notion user found for {slack_user_id}",
            )
        return UserMappingResult(notion_user_id=notion_user_id, slack_user_id=slack_user_id)

    async def map_single(self, user_id: str) -> UserMappingResult:
        self.single_calls.append(user_id)
        return self._map(user_id)

    async def map_multiple(self, user_ids: str) -> list[UserMappingResult]:
        self.multiple_calls.append(user_ids)
        handles = [h.strip() for h in user_ids.split(",") if h.strip()]
        return [self._map(h) for h in handles]


@pytest.fixture
def fake_user_mapping() -> FakeUserMapping:
    return FakeUserMapping({"U12345": "notion-user-123", "U67890": "notion-user-678"})


# ── Notion Client ───────────────────────────────────────────────────────────


class FakeResponseError(HTTPResponseError):
    """HTTPResponseError built without an httpx.Response."""

    def __init__(self, status: int, code: str, message: str) -> None:
        Exception.__init__(self, message)
        self.status = status
        self.code = code
        self.headers = {}
        self.body = message


@pytest.fixture
def response_error() -> type[FakeResponseError]:
    """notion-client error response factory: response_error(404, code, message)."""
    return FakeResponseError


def make_mock_notion_sdk() -> MagicMock:
    """Build a mock notion-client AsyncClient with the namespaces we call."""
    sdk = MagicMock()
    sdk.databases = MagicMock()
    sdk.databases.retrieve = AsyncMock()
    sdk.pages = MagicMock()
    sdk.pages.create = AsyncMock()
    sdk.pages.update = AsyncMock()
    sdk.pages.retrieve = AsyncMock()
    sdk.users = MagicMock()
    sdk.users.list = AsyncMock()
    sdk.aclose = AsyncMock()
    return sdk


@pytest.fixture
def notion_sdk() -> MagicMock:
    return make_mock_notion_sdk()


@pytest.fixture
def notion_client(notion_sdk) -> NotionClient:
    """NotionClient whose underlying SDK client is the notion_sdk mock."""
    with patch("src.notion_bridge.notion.client.AsyncClient", return_value=notion_sdk):
        return NotionClient(token="secret_test", rate_limit_retries=1)


# ── Settings ────────────────────────────────────────────────────────────────


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        NOTION_TOKEN="secret_test",
        SLACK_BOT_TOKEN="xoxb-test",
        FUNCTION_API_KEY="",
        SENTRY_DSN="",
    )
