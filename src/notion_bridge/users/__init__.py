"""Slack -> Notion user mapping.

Provides:
- UserMapper: Email-based mapping of Slack handles to Notion user ids
- UserDirectoryCache: Shared, expiring cache of the Notion user directory
- SlackClient: users.info lookups against the Slack Web API
"""

from src.notion_bridge.users.cache import UserDirectoryCache
from src.notion_bridge.users.mapper import UserMapper, parse_slack_user_id
from src.notion_bridge.users.schemas import DuplicateEmailPolicy, UserMappingResult
from src.notion_bridge.users.slack_client import SlackClient

__all__ = [
    "UserMapper",
    "UserDirectoryCache",
    "SlackClient",
    "DuplicateEmailPolicy",
    "UserMappingResult",
    "parse_slack_user_id",
]
