"""Per-process wiring for the Slack functions.

FunctionRuntime holds what outlives a single invocation (settings and the
Notion user directory cache) and builds the per-invocation clients. The
client factories are injectable so tests can substitute fakes.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

import structlog

from src.notion_bridge.config import Settings
from src.notion_bridge.core.errors import ConfigurationError, InvalidInputError
from src.notion_bridge.notion.client import NotionClient
from src.notion_bridge.notion.fields import collect_fields_from_inputs
from src.notion_bridge.notion.properties import convert_to_notion_properties
from src.notion_bridge.notion.schemas import ConversionResult, DatabaseProperty
from src.notion_bridge.users.cache import UserDirectoryCache
from src.notion_bridge.users.mapper import UserMapper
from src.notion_bridge.users.schemas import DuplicateEmailPolicy
from src.notion_bridge.users.slack_client import SlackClient

logger = structlog.get_logger(__name__)

NotionClientFactory = Callable[[Settings], NotionClient]
SlackClientFactory = Callable[[Settings], SlackClient]


def default_notion_client(settings: Settings) -> NotionClient:
    return NotionClient(
        token=settings.NOTION_TOKEN,
        notion_version=settings.NOTION_API_VERSION,
        rate_limit_retries=settings.NOTION_RATE_LIMIT_RETRIES,
    )


def default_slack_client(settings: Settings) -> SlackClient:
    return SlackClient(
        token=settings.SLACK_BOT_TOKEN,
        base_url=settings.SLACK_API_BASE_URL,
        timeout=settings.SLACK_TIMEOUT,
    )


class FunctionRuntime:
    """Shared state and client construction for Slack function invocations.

    Args:
        settings: Application settings.
        directory_cache: Process-wide Notion user directory cache. A new
            one using NOTION_USER_CACHE_TTL_SECONDS is created when omitted.
        notion_client_factory: Builds a NotionClient per invocation.
        slack_client_factory: Builds a SlackClient per invocation.
    """

    def __init__(
        self,
        settings: Settings,
        directory_cache: UserDirectoryCache | None = None,
        notion_client_factory: NotionClientFactory = default_notion_client,
        slack_client_factory: SlackClientFactory = default_slack_client,
    ) -> None:
        self.settings = settings
        self.directory_cache = directory_cache or UserDirectoryCache(
            ttl_seconds=settings.NOTION_USER_CACHE_TTL_SECONDS
        )
        self._notion_client_factory = notion_client_factory
        self._slack_client_factory = slack_client_factory

    def require_notion_token(self) -> None:
        if not self.settings.NOTION_TOKEN:
            raise ConfigurationError("NOTION_TOKEN environment variable is not set")

    def notion_client(self) -> NotionClient:
        return self._notion_client_factory(self.settings)

    def user_mapper(self, notion_client: NotionClient) -> UserMapper:
        return UserMapper(
            slack_client=self._slack_client_factory(self.settings),
            notion_client=notion_client,
            directory_cache=self.directory_cache,
            duplicate_policy=DuplicateEmailPolicy(self.settings.USER_MAPPING_DUPLICATE_POLICY),
        )

    async def convert_inputs(
        self,
        inputs: Mapping[str, Any],
        writable_properties: Sequence[DatabaseProperty],
        notion_client: NotionClient,
    ) -> ConversionResult:
        """Collect the positional inputs and convert them against the schema."""
        collected = collect_fields_from_inputs(inputs)
        logger.debug(
            "function.fields_collected",
            fields=list(collected.properties_data.keys()),
            user_fields=list(collected.user_fields_data.keys()),
        )
        return await convert_to_notion_properties(
            collected,
            writable_properties,
            self.user_mapper(notion_client),
        )


def require_input(inputs: Mapping[str, Any], name: str) -> str:
    value = inputs.get(name)
    if not value:
        raise InvalidInputError(f"{name} is required")
    return str(value)
