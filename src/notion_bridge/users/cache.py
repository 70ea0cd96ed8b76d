"""Time-bounded cache of the Notion workspace user directory.

Mapping a Slack user requires scanning every Notion user for a matching
email. Listing users is paginated and slow, so the full list is cached for
a few minutes and shared by every mapping in the process.

The cached list is an immutable tuple replaced in a single assignment, so
concurrent readers see either the previous list or the new one, never a
partially fetched one. Refreshes are not coalesced: readers that all find
the cache stale will each fetch.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable, Sequence

import structlog
from prometheus_client import Counter

from src.notion_bridge.notion.schemas import NotionUser

logger = structlog.get_logger(__name__)

DEFAULT_TTL_SECONDS = 300.0

user_directory_fetches_total = Counter(
    "notion_user_directory_fetches_total",
    "Full Notion user directory fetches (cache misses)",
)

UserFetcher = Callable[[], Awaitable[Sequence[NotionUser]]]


class UserDirectoryCache:
    """Read-through cache for the Notion user list.

    Args:
        ttl_seconds: How long a fetched list stays fresh.
        clock: Monotonic time source in seconds; injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._users: tuple[NotionUser, ...] | None = None
        self._expires_at: float | None = None

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def is_fresh(self) -> bool:
        return (
            self._users is not None
            and self._expires_at is not None
            and self._clock() < self._expires_at
        )

    async def get_users(self, fetch: UserFetcher) -> tuple[NotionUser, ...]:
        """Return the cached directory, refetching with `fetch` when stale."""
        users = self._users
        if users is not None and self.is_fresh():
            return users

        fetched_at = self._clock()
        users = tuple(await fetch())
        user_directory_fetches_total.inc()

        self._users, self._expires_at = users, fetched_at + self._ttl
        logger.info(
            "user_directory.refreshed",
            count=len(users),
            ttl_seconds=self._ttl,
        )
        return users

    def invalidate(self) -> None:
        self._users = None
        self._expires_at = None
