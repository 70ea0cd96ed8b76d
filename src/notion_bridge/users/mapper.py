"""Slack -> Notion user mapping by email.

Flow for one Slack handle:
1. Parse the handle: plain id (U0123ABCD) or mention (<@U0123ABCD|name>)
2. Validate the id shape
3. Fetch the Slack profile (users.info) and read its email
4. Read the Notion user directory through the shared UserDirectoryCache
5. Match the email case-insensitively against Notion people (bots ignored)

Every failure is returned as a UserMappingResult with an error message so
the converter can surface it as a warning. Transport errors still propagate.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Sequence

import structlog
from prometheus_client import Counter

from src.notion_bridge.core.errors import NotionAPIError
from src.notion_bridge.notion.client import NotionClient
from src.notion_bridge.notion.schemas import NotionUser
from src.notion_bridge.users.cache import UserDirectoryCache
from src.notion_bridge.users.schemas import DuplicateEmailPolicy, UserMappingResult
from src.notion_bridge.users.slack_client import SlackClient

logger = structlog.get_logger(__name__)

user_mappings_total = Counter(
    "slack_notion_user_mappings_total",
    "Slack -> Notion user mapping attempts",
    ["status"],
)

_MENTION_RE = re.compile(r"^<@([A-Z0-9]+)(?:\|[^>]+)?>$")
_SLACK_USER_ID_RE = re.compile(r"^[A-Z0-9]{9,11}$")


def parse_slack_user_id(handle: str) -> str:
    """Extract the raw Slack user id from a plain id or a mention."""
    trimmed = handle.strip()
    match = _MENTION_RE.match(trimmed)
    if match:
        return match.group(1)
    return trimmed


def match_notion_users(users: Sequence[NotionUser], email: str) -> list[NotionUser]:
    """Notion people whose email equals `email`, ignoring case, in listing order."""
    wanted = email.lower()
    return [
        user
        for user in users
        if user.type == "person" and user.email is not None and user.email.lower() == wanted
    ]


class UserMapper:
    """Maps Slack users to Notion users via their shared email address.

    Implements the UserMappingFunction protocol (map_single / map_multiple)
    consumed by convert_to_notion_properties().

    Args:
        slack_client: Slack Web API client for users.info.
        notion_client: Notion client used to list workspace users.
        directory_cache: Process-wide Notion user directory cache.
        duplicate_policy: Resolution when several Notion people share an email.
    """

    def __init__(
        self,
        slack_client: SlackClient,
        notion_client: NotionClient,
        directory_cache: UserDirectoryCache,
        duplicate_policy: DuplicateEmailPolicy = DuplicateEmailPolicy.FIRST,
    ) -> None:
        self._slack = slack_client
        self._notion = notion_client
        self._cache = directory_cache
        self._duplicate_policy = duplicate_policy

    async def map_slack_user_to_notion_user(self, slack_user_id: str) -> UserMappingResult:
        """Map one Slack handle to a Notion user id."""
        parsed_id = parse_slack_user_id(slack_user_id)

        if not _SLACK_USER_ID_RE.match(parsed_id):
            logger.error(
                "user_mapper.invalid_slack_user_id",
                original=slack_user_id,
                parsed=parsed_id,
            )
            return self._failed(
                parsed_id,
                f'Invalid Slack user ID format: "{slack_user_id}". '
                "Expected format: U1234567 or <@U1234567>",
            )

        info = await self._slack.users_info(parsed_id)
        if not info.ok or info.user is None:
            return self._failed(parsed_id, f"Slack API error: {info.error or 'Unknown error'}")

        slack_email = info.user.profile.email
        if not slack_email:
            logger.warning("user_mapper.slack_user_without_email", slack_user_id=parsed_id)
            return self._failed(
                parsed_id,
                "Slack user has no email address (check users:read.email scope)",
            )

        try:
            notion_users = await self._cache.get_users(self._notion.list_users)
        except NotionAPIError as exc:
            return self._failed(parsed_id, f"Error mapping user: {exc}")

        matches = match_notion_users(notion_users, slack_email)

        if not matches:
            logger.warning(
                "user_mapper.no_notion_match",
                slack_user_id=parsed_id,
                email=slack_email,
                people=sum(1 for u in notion_users if u.type == "person"),
            )
            return self._failed(parsed_id, f"No Notion user found with email: {slack_email}")

        if len(matches) > 1:
            logger.warning(
                "user_mapper.multiple_matches",
                slack_user_id=parsed_id,
                email=slack_email,
                matches=[u.id for u in matches],
                policy=self._duplicate_policy.value,
            )
            if self._duplicate_policy == DuplicateEmailPolicy.REJECT:
                return self._failed(
                    parsed_id, f"Multiple Notion users found with email: {slack_email}"
                )

        notion_user_id = matches[0].id
        logger.info(
            "user_mapper.mapped",
            slack_user_id=parsed_id,
            notion_user_id=notion_user_id,
        )
        user_mappings_total.labels(status="success").inc()
        return UserMappingResult(notion_user_id=notion_user_id, slack_user_id=parsed_id)

    async def map_multiple_users(self, user_ids: str) -> list[UserMappingResult]:
        """Map a comma-separated list of Slack handles, concurrently, in input order."""
        handles = [part.strip() for part in user_ids.split(",")]
        handles = [h for h in handles if h]
        return list(
            await asyncio.gather(*(self.map_slack_user_to_notion_user(h) for h in handles))
        )

    # UserMappingFunction protocol

    async def map_single(self, user_id: str) -> UserMappingResult:
        return await self.map_slack_user_to_notion_user(user_id)

    async def map_multiple(self, user_ids: str) -> list[UserMappingResult]:
        return await self.map_multiple_users(user_ids)

    @staticmethod
    def _failed(slack_user_id: str, error: str) -> UserMappingResult:
        user_mappings_total.labels(status="failed").inc()
        return UserMappingResult(notion_user_id=None, slack_user_id=slack_user_id, error=error)
