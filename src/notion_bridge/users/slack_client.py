"""Async HTTP client for the Slack Web API (users.info).

Slack reports API failures in the body (`{"ok": false, "error": "user_not_found"}`)
rather than via HTTP status, so responses are parsed and returned as-is and the
caller decides what a non-ok answer means. Non-JSON error responses (proxies,
5xx pages) are folded into the same shape. Transport errors (connect, timeout)
propagate.
"""

from __future__ import annotations

import httpx
import structlog
from pydantic import ValidationError

from src.notion_bridge.users.schemas import SlackUserInfoResponse

logger = structlog.get_logger(__name__)

DEFAULT_SLACK_API_BASE_URL = "https://slack.com/api"


class SlackClient:
    """Minimal Slack Web API client for user lookups.

    Args:
        token: Slack bot token (xoxb-...) with users:read and users:read.email.
        base_url: Slack Web API base URL.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_SLACK_API_BASE_URL,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._headers = {"Authorization": f"Bearer {token}"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(headers=self._headers, timeout=self._timeout)

    async def users_info(self, user_id: str) -> SlackUserInfoResponse:
        """Call users.info for one Slack user id."""
        async with self._client() as client:
            response = await client.get(
                f"{self._base_url}/users.info",
                params={"user": user_id},
            )

        try:
            info = SlackUserInfoResponse.model_validate(response.json())
        except (ValueError, ValidationError):
            info = SlackUserInfoResponse(ok=False, error=f"http_{response.status_code}")

        logger.debug(
            "slack.users_info",
            user_id=user_id,
            ok=info.ok,
            error=info.error,
            status_code=response.status_code,
        )
        return info
