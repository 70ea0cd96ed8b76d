"""Tests for SlackClient.users_info with httpx.AsyncClient.get patched."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from src.notion_bridge.users.slack_client import SlackClient

USERS_INFO_URL = "https://slack.com/api/users.info"


def _response(status_code: int, **kwargs) -> httpx.Response:
    return httpx.Response(
        status_code,
        request=httpx.Request("GET", USERS_INFO_URL),
        **kwargs,
    )


class TestUsersInfo:
    async def test_success(self):
        client = SlackClient(token="xoxb-test")
        body = {
            "ok": True,
            "user": {
                "id": "U0ALICE123",
                "name": "alice",
                "profile": {"email": "alice@example.com", "real_name": "Alice"},
            },
        }

        with patch(
            "httpx.AsyncClient.get",
            new_callable=AsyncMock,
            return_value=_response(200, json=body),
        ) as mock_get:
            info = await client.users_info("U0ALICE123")

        assert info.ok is True
        assert info.user.id == "U0ALICE123"
        assert info.user.profile.email == "alice@example.com"
        mock_get.assert_awaited_once_with(USERS_INFO_URL, params={"user": "U0ALICE123"})

    async def test_slack_error_body(self):
        client = SlackClient(token="xoxb-test")

        with patch(
            "httpx.AsyncClient.get",
            new_callable=AsyncMock,
            return_value=_response(200, json={"ok": False, "error": "user_not_found"}),
        ):
            info = await client.users_info("U0MISSING1")

        assert info.ok is False
        assert info.error == "user_not_found"
        assert info.user is None

    async def test_non_json_response(self):
        client = SlackClient(token="xoxb-test")

        with patch(
            "httpx.AsyncClient.get",
            new_callable=AsyncMock,
            return_value=_response(502, text="<html>Bad Gateway</html>"),
        ):
            info = await client.users_info("U0ALICE123")

        assert info.ok is False
        assert info.error == "http_502"

    async def test_custom_base_url(self):
        client = SlackClient(token="xoxb-test", base_url="https://slack.internal/api/")

        with patch(
            "httpx.AsyncClient.get",
            new_callable=AsyncMock,
            return_value=_response(200, json={"ok": False, "error": "invalid_auth"}),
        ) as mock_get:
            await client.users_info("U0ALICE123")

        assert mock_get.await_args.args[0] == "https://slack.internal/api/users.info"

    async def test_transport_error_propagates(self):
        client = SlackClient(token="xoxb-test")

        with patch(
            "httpx.AsyncClient.get",
            new_callable=AsyncMock,
            side_effect=httpx.ConnectError("connection refused"),
        ):
            with pytest.raises(httpx.ConnectError):
                await client.users_info("U0ALICE123")

    def test_bearer_header(self):
        client = SlackClient(token="xoxb-test")
        assert client._headers == {"Authorization": "Bearer xoxb-test"}
