"""Notion API client -- schema access, page writes, and user listing.

Thin async wrapper over notion-client's AsyncClient that:
- Pins the Notion-Version header (bearer token + version on every request)
- Translates non-success responses into NotionAPIError
- Filters database schemas down to writable properties
- Concatenates the paginated /users listing

Rate limiting: a `rate_limited` (HTTP 429) answer is retried with tenacity
exponential backoff, bounded by `rate_limit_retries` attempts. Every other
non-success response is raised immediately; transport errors propagate
untouched.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable

import structlog
from notion_client import AsyncClient
from notion_client.errors import HTTPResponseError
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from src.notion_bridge.core.errors import NotionAPIError
from src.notion_bridge.notion.schemas import (
    READ_ONLY_PROPERTY_TYPES,
    CreatedPage,
    DatabaseProperty,
    NotionDatabase,
    NotionUser,
    NotionUsersPage,
    PageInfo,
)

logger = structlog.get_logger(__name__)

DEFAULT_NOTION_VERSION = "2022-06-28"
RATE_LIMITED_STATUS = 429


def _is_rate_limited(exc: BaseException) -> bool:
    return isinstance(exc, NotionAPIError) and (
        exc.status == RATE_LIMITED_STATUS or exc.code == "rate_limited"
    )


def _to_api_error(exc: HTTPResponseError) -> NotionAPIError:
    """Translate a notion-client response error into NotionAPIError."""
    code = getattr(exc, "code", None)
    if isinstance(code, Enum):
        code = code.value
    message = str(exc) or getattr(exc, "body", "") or "Unknown error"
    return NotionAPIError(status=exc.status, code=code, message=message)


class NotionClient:
    """Async Notion API client used by the create/update item functions.

    Args:
        token: Notion integration token (internal integration secret).
        notion_version: Value sent as the Notion-Version header.
        rate_limit_retries: Max attempts for a rate-limited request.
    """

    # Backoff between rate-limited attempts
    retry_wait = wait_exponential(multiplier=1, min=1, max=10)

    def __init__(
        self,
        token: str,
        notion_version: str = DEFAULT_NOTION_VERSION,
        rate_limit_retries: int = 3,
    ) -> None:
        self._client = AsyncClient(auth=token, notion_version=notion_version)
        self._rate_limit_retries = max(1, rate_limit_retries)

    async def __aenter__(self) -> NotionClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        operation: str,
        call: Callable[..., Awaitable[Any]],
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Issue one API call, retrying only when Notion rate-limits us."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._rate_limit_retries),
            wait=self.retry_wait,
            retry=retry_if_exception(_is_rate_limited),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                try:
                    return await call(**kwargs)
                except HTTPResponseError as exc:
                    error = _to_api_error(exc)
                    logger.warning(
                        "notion.request_failed",
                        operation=operation,
                        status=error.status,
                        code=error.code,
                        attempt=attempt.retry_state.attempt_number,
                    )
                    raise error from exc
        raise AssertionError("unreachable")  # pragma: no cover

    # ── Schema Accessor ───────────────────────────────────────────────────

    async def get_database_schema(self, database_id: str) -> NotionDatabase:
        """Fetch a database object (including its property schema)."""
        data = await self._request(
            "databases.retrieve",
            self._client.databases.retrieve,
            database_id=database_id,
        )
        return NotionDatabase.model_validate(data)

    def get_writable_properties(self, database: NotionDatabase) -> list[DatabaseProperty]:
        """Return the database properties a page payload may set.

        Read-only computed types (created/last-edited time and actor) are
        dropped. A property without an explicit name is keyed by its schema
        key. Two properties resolving to the same name are kept both, in
        schema order; lookups by name see the first.
        """
        writable: list[DatabaseProperty] = []
        seen: set[str] = set()

        for key, prop in database.properties.items():
            if prop.type in READ_ONLY_PROPERTY_TYPES:
                continue

            name = prop.name or key
            if name in seen:
                logger.warning(
                    "notion.duplicate_property_name",
                    database_id=database.id,
                    name=name,
                    property_id=prop.id,
                )
            seen.add(name)
            writable.append(DatabaseProperty(id=prop.id, name=name, type=prop.type))

        return writable

    # ── Record Writer ─────────────────────────────────────────────────────

    async def create_page(
        self, database_id: str, properties: dict[str, dict[str, Any]]
    ) -> CreatedPage:
        """Create a page in a database; returns its id and url."""
        data = await self._request(
            "pages.create",
            self._client.pages.create,
            parent={"database_id": database_id},
            properties=properties,
        )
        page = CreatedPage.model_validate(data)
        logger.info(
            "notion.page_created",
            page_id=page.id,
            database_id=database_id,
            properties=list(properties.keys()),
        )
        return page

    async def update_page(
        self, page_id: str, properties: dict[str, dict[str, Any]]
    ) -> CreatedPage:
        """Update page properties; returns the page id and url."""
        data = await self._request(
            "pages.update",
            self._client.pages.update,
            page_id=page_id,
            properties=properties,
        )
        page = CreatedPage.model_validate(data)
        logger.info(
            "notion.page_updated",
            page_id=page.id,
            properties=list(properties.keys()),
        )
        return page

    async def get_page(self, page_id: str) -> PageInfo:
        """Fetch a page and report which database (if any) it belongs to."""
        data = await self._request(
            "pages.retrieve",
            self._client.pages.retrieve,
            page_id=page_id,
        )
        parent = data.get("parent") or {}
        return PageInfo(
            id=data["id"],
            url=data.get("url", ""),
            parent_type=parent.get("type"),
            parent_database_id=parent.get("database_id"),
        )

    # ── Users ─────────────────────────────────────────────────────────────

    async def list_users(self) -> list[NotionUser]:
        """Fetch every workspace user, following pagination cursors."""
        users: list[NotionUser] = []
        cursor: str | None = None

        while True:
            kwargs: dict[str, Any] = {}
            if cursor:
                kwargs["start_cursor"] = cursor
            data = await self._request("users.list", self._client.users.list, **kwargs)
            page = NotionUsersPage.model_validate(data)
            users.extend(page.results)

            if not page.has_more or not page.next_cursor:
                break
            cursor = page.next_cursor

        logger.debug("notion.users_listed", count=len(users))
        return users
